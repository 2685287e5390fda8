import enum
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from core.database import Base

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

FEN_MAX_LENGTH = 100
NOTATION_MAX_LENGTH = 10
MOVE_NUMBER_MAX = 2**31 - 1  # Integer column

STATISTICS_ID = 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameStatus(str, enum.Enum):
    ACTIVE = "active"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"
    ABANDONED = "abandoned"


TERMINAL_STATUSES = (
    GameStatus.CHECKMATE,
    GameStatus.STALEMATE,
    GameStatus.DRAW,
    GameStatus.ABANDONED,
)

# abandoned games are left out of the win/draw aggregates
DECIDED_STATUSES = (GameStatus.CHECKMATE, GameStatus.STALEMATE, GameStatus.DRAW)


class Player(str, enum.Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Player":
        return Player.BLACK if self is Player.WHITE else Player.WHITE


class Winner(str, enum.Enum):
    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"


def _enum(enum_cls, name: str):
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
        create_constraint=True,
    )


# GAME

class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True)

    fen = Column(String(FEN_MAX_LENGTH), nullable=False, default=START_FEN)
    pgn = Column(Text, nullable=False, default="")

    status = Column(_enum(GameStatus, "game_status"), nullable=False, default=GameStatus.ACTIVE, index=True)
    current_player = Column(_enum(Player, "player_color"), nullable=False, default=Player.WHITE)
    winner = Column(_enum(Winner, "game_winner"), nullable=True)  # NULL while undecided

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True)
    # refreshed explicitly by every mutation in game_management.logic
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True)

    move_count = Column(Integer, nullable=False, default=0)  # turns, see Move.move_number

    moves = relationship(
        "Move",
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [Move.move_number, Move.id],
    )

    __table_args__ = (
        CheckConstraint("move_count >= 0", name="ck_games_move_count"),
    )


# MOVES

class Move(Base):
    __tablename__ = "moves"

    id = Column(Integer, primary_key=True)

    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)

    # turn number: white's and black's plies of the same turn share it
    move_number = Column(Integer, nullable=False, index=True)
    player = Column(_enum(Player, "player_color"), nullable=False)
    move_notation = Column(String(NOTATION_MAX_LENGTH), nullable=False)

    fen_before = Column(String(FEN_MAX_LENGTH), nullable=False)
    fen_after = Column(String(FEN_MAX_LENGTH), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    game = relationship("Game", back_populates="moves")

    __table_args__ = (
        CheckConstraint("move_number > 0", name="ck_moves_move_number"),
        Index("ix_moves_game_id_move_number", "game_id", "move_number"),
    )


# STATISTICS

class GameStatistics(Base):
    """Process-wide counters, one row created by core.init_db."""

    __tablename__ = "game_statistics"

    id = Column(Integer, primary_key=True, default=STATISTICS_ID, autoincrement=False)

    total_games = Column(Integer, nullable=False, default=0)
    white_wins = Column(Integer, nullable=False, default=0)
    black_wins = Column(Integer, nullable=False, default=0)
    draws = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        CheckConstraint(f"id = {STATISTICS_ID}", name="ck_game_statistics_singleton"),
        CheckConstraint(
            "total_games >= 0 AND white_wins >= 0 AND black_wins >= 0 AND draws >= 0",
            name="ck_game_statistics_non_negative",
        ),
    )


WINNER_COUNTERS = {
    Winner.WHITE: GameStatistics.white_wins,
    Winner.BLACK: GameStatistics.black_wins,
    Winner.DRAW: GameStatistics.draws,
}
