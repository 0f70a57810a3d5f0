"""Chess rules engine: legal move generation, game state and FEN, served over HTTP."""

__version__ = "0.1.0"
