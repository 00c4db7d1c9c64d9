"""Read-only projections of domain objects onto response models (for game / lobby with given ID)."""

from src.api.models import (
    ChatMessageResponse,
    GameView,
    LobbyStateResponse,
    MoveResponse,
)
from src.connect_four.game import GameState
from src.connect_four.lobby import ChatMessage, Lobby
from src.core.models import AppliedMoveResult


def game_view(state: GameState) -> GameView:
    """Grid, playable columns, whose turn it is and which cells to highlight."""
    return GameView(
        rows=state.board.rows,
        cols=state.board.cols,
        grid=[[cell.value for cell in row] for row in state.board.grid],
        playable_columns=state.column_flags(),
        current_player=state.current_player,
        winning_cells=[coord.as_tuple() for coord in state.winning_cells],
        gravity_inverted=state.gravity_inverted,
        turn_count=state.turn_count,
        mode=state.mode,
        difficulty=state.difficulty,
        names=dict(state.names),
        scores=dict(state.scores),
        message=state.message,
        game_over=state.game_over,
        winner=state.winner,
        last_move=state.last_move.as_tuple() if state.last_move else None,
    )


def move_response(result: AppliedMoveResult) -> MoveResponse:
    return MoveResponse(
        row=result.row,
        col=result.col,
        side=result.side,
        won=result.won,
        draw=result.draw,
        gravity_flipped=result.gravity_flipped,
    )


def lobby_state(lobby: Lobby) -> LobbyStateResponse:
    state = lobby.state
    return LobbyStateResponse(
        code=lobby.code,
        current_side=state.current_player,
        gravity_inverted=state.gravity_inverted,
        turn_count=state.turn_count,
        game_over=state.game_over,
        winner=state.winner,
        has_red=lobby.has_red,
        has_yellow=lobby.has_yellow,
        last_move=state.last_move.as_tuple() if state.last_move else None,
        scores=dict(state.scores),
        rematch_votes=sorted(lobby.rematch_votes),
        latest_message_id=lobby.latest_message_id,
    )


def chat_message_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        timestamp=message.timestamp,
        side=message.side,
        name=message.name,
        text=message.text,
    )
