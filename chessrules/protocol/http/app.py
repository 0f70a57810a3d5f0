from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    chess_error_handler,
    exception_handler,
    http_exception_handler,
    mode_error_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import GameSession, InMemorySessionStore
from ..modes import Event, ModeError, after_move, allows
from ...engine.board import Coord
from ...engine.errors import ChessError
from ...engine.fen import STARTPOS_FEN, decode
from ...engine.game import Game
from ...engine.move import square_to_str, str_to_square
from ...engine.perft import perft as perft_nodes
from ...engine.pieces import Color, PieceKind, promotion_kind
from ...engine.terminal import Terminal


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="Starting FEN (default: startpos)")
    allow_castling_out_of_check: bool = False


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="Long algebraic move, e.g., e2e4 or e7e8q")


class PromoteRequest(BaseModel):
    piece: str = Field(..., pattern="^[qrbnQRBN]$", description="Promotion piece letter")


class PlacePieceRequest(BaseModel):
    piece: str = Field(..., pattern="^[kqrbnpKQRBNP]$", description="Piece letter")
    color: str = Field(..., pattern="^[wb]$", description="'w' or 'b'")


class PerftRequest(BaseModel):
    fen: str = Field(default=STARTPOS_FEN)
    depth: int = Field(default=1, ge=0, le=5)


class GameStateResponse(BaseModel):
    game_id: str
    fen: str
    mode: str
    turn: str
    legal_moves: List[str]
    in_check: bool
    checkmate: bool
    stalemate: bool
    terminal: Optional[str]
    pending_promotion: bool
    halfmove_clock: int
    fullmove_number: int
    last_move: Optional[str]
    move_history: List[str]


class SquareMovesResponse(BaseModel):
    square: str
    moves: List[str]


class ExitResponse(BaseModel):
    game_id: str
    mode: str


def create_app() -> FastAPI:
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    # Basic logging setup
    logging.basicConfig(level=logging.INFO)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ChessError, chess_error_handler)
    app.add_exception_handler(ModeError, mode_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    # In-memory session store for games
    store = InMemorySessionStore()
    app.state.sessions = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        req = req or CreateGameRequest()
        if req.fen is None:
            game = Game.new(allow_castling_out_of_check=req.allow_castling_out_of_check)
        else:
            game = Game.from_fen(
                req.fen, allow_castling_out_of_check=req.allow_castling_out_of_check
            )
        game_id = store.create(game)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
    async def get_state(game_id: str) -> GameStateResponse:
        return _state_response(game_id, _require_session(store, game_id))

    @app.get("/api/games/{game_id}/moves/{square}", response_model=SquareMovesResponse)
    async def square_moves(game_id: str, square: str) -> SquareMovesResponse:
        session = _require_session(store, game_id)
        _require_allowed(session, Event.MOVE)
        coord = _parse_square(square)
        targets = session.game.legal_moves(coord)
        moves = [square_to_str(t) for t in sorted(targets, key=lambda c: (c[1], c[0]))]
        return SquareMovesResponse(square=square_to_str(coord), moves=moves)

    @app.post("/api/games/{game_id}/position", response_model=GameStateResponse)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        _require_allowed(session, Event.LOAD_POSITION)
        session.game.load_fen(req.fen)
        session.fire(Event.LOAD_POSITION)
        return _state_response(game_id, session)

    @app.post("/api/games/{game_id}/move", response_model=GameStateResponse)
    async def make_move(game_id: str, req: MoveRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        _require_allowed(session, Event.MOVE)
        outcome = session.game.apply_uci(req.move)
        session.mode = after_move(session.mode, outcome.pending_promotion)
        if outcome.terminal is not Terminal.NONE:
            logger.info(
                "game finished",
                extra={"game_id": game_id, "terminal": outcome.terminal.value},
            )
        return _state_response(game_id, session)

    @app.post("/api/games/{game_id}/promote", response_model=GameStateResponse)
    async def promote(game_id: str, req: PromoteRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        _require_allowed(session, Event.PROMOTION_CHOSEN)
        session.game.promote(promotion_kind(req.piece))
        session.fire(Event.PROMOTION_CHOSEN)
        return _state_response(game_id, session)

    @app.post("/api/games/{game_id}/undo", response_model=GameStateResponse)
    async def undo(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        _require_allowed(session, Event.UNDO)
        session.game.undo_move()
        session.fire(Event.UNDO)
        return _state_response(game_id, session)

    @app.post("/api/games/{game_id}/edit", response_model=GameStateResponse)
    async def enter_edit(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        session.fire(Event.ENTER_EDIT)
        return _state_response(game_id, session)

    @app.post("/api/games/{game_id}/play", response_model=GameStateResponse)
    async def leave_edit(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        session.fire(Event.LEAVE_EDIT)
        return _state_response(game_id, session)

    @app.put("/api/games/{game_id}/squares/{square}", response_model=GameStateResponse)
    async def place_piece(game_id: str, square: str, req: PlacePieceRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        coord = _parse_square(square)
        kind = PieceKind(req.piece.lower())
        color = Color.WHITE if req.color == "w" else Color.BLACK
        session.fire(Event.PICK_PIECE)
        try:
            session.game.place_piece(kind, color, coord)
        finally:
            session.fire(Event.PICK_COLOUR)
        return _state_response(game_id, session)

    @app.delete("/api/games/{game_id}/squares/{square}", response_model=GameStateResponse)
    async def clear_square(game_id: str, square: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        coord = _parse_square(square)
        _require_allowed(session, Event.EDIT_SQUARE)
        session.game.clear_square(coord)
        session.fire(Event.EDIT_SQUARE)
        return _state_response(game_id, session)

    @app.delete("/api/games/{game_id}/squares", response_model=GameStateResponse)
    async def clear_board(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        _require_allowed(session, Event.EDIT_SQUARE)
        session.game.clear_board()
        session.fire(Event.EDIT_SQUARE)
        return _state_response(game_id, session)

    @app.delete("/api/games/{game_id}", response_model=ExitResponse)
    async def exit_game(game_id: str) -> ExitResponse:
        session = _require_session(store, game_id)
        mode = session.fire(Event.QUIT)
        store.delete(game_id)
        logger.info("game closed", extra={"game_id": game_id})
        return ExitResponse(game_id=game_id, mode=mode.value)

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        state = decode(req.fen)
        return {"nodes": perft_nodes(state, req.depth)}

    return app


def _state_response(game_id: str, session: GameSession) -> GameStateResponse:
    game = session.game
    terminal = game.terminal()
    history = game.move_history_uci()
    return GameStateResponse(
        game_id=game_id,
        fen=game.to_fen(),
        mode=session.mode.value,
        turn=game.turn.fen_char,
        legal_moves=[m.to_uci() for m in game.all_legal_moves()],
        in_check=game.is_in_check(),
        checkmate=terminal is Terminal.CHECKMATE,
        stalemate=terminal is Terminal.STALEMATE,
        terminal=None if terminal is Terminal.NONE else terminal.value,
        pending_promotion=game.pending_promotion,
        halfmove_clock=game.state.halfmove_clock,
        fullmove_number=game.state.fullmove_number,
        last_move=history[-1] if history else None,
        move_history=history,
    )


def _require_session(store: InMemorySessionStore, game_id: str) -> GameSession:
    session = store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _require_allowed(session: GameSession, event: Event) -> None:
    if not allows(session.mode, event):
        raise ModeError(session.mode, event)


def _parse_square(square: str) -> Coord:
    try:
        return str_to_square(square)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# Default app for non-factory servers
app = create_app()
