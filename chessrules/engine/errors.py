from __future__ import annotations


class ChessError(Exception):
    """Base class for all errors raised by the rules engine."""


class ContractViolation(ChessError):
    """A caller broke an internal contract (e.g. off-board coordinates).

    This is a programming error and is never caught inside the engine.
    """


class MalformedFen(ChessError, ValueError):
    """FEN text could not be decoded. The current position is left untouched."""


class IllegalSelection(ChessError, ValueError):
    """The caller selected an empty/foreign square or an unreachable destination."""
