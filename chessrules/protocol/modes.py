from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class Mode(Enum):
    """Interaction modes of a game session."""

    GAMEPLAY = "gameplay"
    EDIT_BOARD = "edit_board"
    CHOOSE_COLOUR = "choose_colour"
    PROMOTE_PAWN = "promote_pawn"
    EXIT_GAME = "exit_game"


class Event(Enum):
    ENTER_EDIT = "enter_edit"
    LEAVE_EDIT = "leave_edit"
    PICK_PIECE = "pick_piece"
    PICK_COLOUR = "pick_colour"
    EDIT_SQUARE = "edit_square"
    MOVE = "move"
    MOVE_NEEDS_PROMOTION = "move_needs_promotion"
    PROMOTION_CHOSEN = "promotion_chosen"
    UNDO = "undo"
    LOAD_POSITION = "load_position"
    QUIT = "quit"


class ModeError(Exception):
    """An event that the current mode does not accept."""

    def __init__(self, mode: Mode, event: Event) -> None:
        super().__init__(f"{event.value} is not allowed in {mode.value} mode")
        self.mode = mode
        self.event = event


_TRANSITIONS: Dict[Tuple[Mode, Event], Mode] = {
    (Mode.GAMEPLAY, Event.MOVE): Mode.GAMEPLAY,
    (Mode.GAMEPLAY, Event.MOVE_NEEDS_PROMOTION): Mode.PROMOTE_PAWN,
    (Mode.GAMEPLAY, Event.UNDO): Mode.GAMEPLAY,
    (Mode.GAMEPLAY, Event.LOAD_POSITION): Mode.GAMEPLAY,
    (Mode.GAMEPLAY, Event.ENTER_EDIT): Mode.EDIT_BOARD,
    (Mode.GAMEPLAY, Event.QUIT): Mode.EXIT_GAME,
    (Mode.PROMOTE_PAWN, Event.PROMOTION_CHOSEN): Mode.GAMEPLAY,
    (Mode.PROMOTE_PAWN, Event.UNDO): Mode.GAMEPLAY,
    (Mode.PROMOTE_PAWN, Event.QUIT): Mode.EXIT_GAME,
    (Mode.EDIT_BOARD, Event.PICK_PIECE): Mode.CHOOSE_COLOUR,
    (Mode.EDIT_BOARD, Event.EDIT_SQUARE): Mode.EDIT_BOARD,
    (Mode.EDIT_BOARD, Event.LOAD_POSITION): Mode.EDIT_BOARD,
    (Mode.EDIT_BOARD, Event.LEAVE_EDIT): Mode.GAMEPLAY,
    (Mode.EDIT_BOARD, Event.QUIT): Mode.EXIT_GAME,
    (Mode.CHOOSE_COLOUR, Event.PICK_COLOUR): Mode.EDIT_BOARD,
    (Mode.CHOOSE_COLOUR, Event.LEAVE_EDIT): Mode.EDIT_BOARD,
}


def transition(mode: Mode, event: Event) -> Mode:
    """Return the mode reached from ``mode`` on ``event``.

    Raises:
        ModeError: If ``event`` is not accepted in ``mode``. EXIT_GAME accepts
            nothing.
    """
    try:
        return _TRANSITIONS[(mode, event)]
    except KeyError:
        raise ModeError(mode, event) from None


def allows(mode: Mode, event: Event) -> bool:
    return (mode, event) in _TRANSITIONS


def after_move(mode: Mode, pending_promotion: bool) -> Mode:
    """Mode after a move was accepted in ``mode``."""
    return transition(mode, Event.MOVE_NEEDS_PROMOTION if pending_promotion else Event.MOVE)
