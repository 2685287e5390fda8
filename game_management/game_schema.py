from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List

from core.models import FEN_MAX_LENGTH, MOVE_NUMBER_MAX, NOTATION_MAX_LENGTH, GameStatus, Player, Winner


class Record(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# Requests

class MoveCreate(Record):
    move_number: int = Field(..., gt=0, le=MOVE_NUMBER_MAX, description="Turn number; both colours share it.")
    player: str = Field(..., description="'white' or 'black'")
    move_notation: str = Field(..., min_length=1, max_length=NOTATION_MAX_LENGTH, description="SAN, e.g. 'Nf3'")
    fen_before: str = Field(..., min_length=1, max_length=FEN_MAX_LENGTH)
    fen_after: str = Field(..., min_length=1, max_length=FEN_MAX_LENGTH)
    pgn: str = Field(default="", description="Full PGN up to and including this move.")


class GameComplete(Record):
    status: str = Field(..., description="checkmate | stalemate | draw | abandoned")
    winner: Optional[str] = Field(default=None, description="white | black | draw, or null when undecided")


# Responses

class MoveRecord(Record):
    id: int
    game_id: int
    move_number: int
    player: Player
    move_notation: str
    fen_before: str
    fen_after: str
    created_at: datetime


class GameRecord(Record):
    id: int
    fen: str
    pgn: str
    status: GameStatus
    current_player: Player
    winner: Optional[Winner] = None
    created_at: datetime
    updated_at: datetime
    move_count: int
    total_moves: Optional[int] = None
    moves: Optional[List[MoveRecord]] = None


class GameStatisticsRecord(Record):
    total_games: int
    white_wins: int
    black_wins: int
    draws: int
    average_moves: Optional[float] = None


class AggregateStatisticsRecord(Record):
    total_games: int
    white_wins: int
    black_wins: int
    draws: int
    created_at: datetime
    updated_at: datetime
