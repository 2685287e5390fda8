"""Data-access facade used by the HTTP layer.

Every public method runs in its own ``transaction()`` scope, so a pooled
connection is held only for the duration of that one call and is handed
back on every exit path. Rows are turned into pydantic records before the
scope closes.
"""
import logging

from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from core.database import SessionLocal, transaction
from core.errors import ErrorCode, ErrorMessage, game_not_found, invalid_enum, invalid_input, storage_failure
from core.models import Game, GameStatus, Player, TERMINAL_STATUSES, Winner
from game_management import logic, queries
from game_management.game_schema import (
    AggregateStatisticsRecord,
    GameComplete,
    GameRecord,
    GameStatisticsRecord,
    MoveCreate,
    MoveRecord,
)
from stats.stats import get_aggregate_statistics, get_game_statistics

logger = logging.getLogger(__name__)


def orm_to_dict(obj) -> dict:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


def to_game_record(game: Game, moves=None, total_moves: int | None = None) -> GameRecord:
    data = orm_to_dict(game)
    data["total_moves"] = total_moves
    if moves is not None:
        data["moves"] = [MoveRecord.model_validate(m) for m in moves]
    return GameRecord.model_validate(data)


def _coerce(enum_cls, field: str, value, allowed=None):
    allowed = allowed or list(enum_cls)
    try:
        member = enum_cls(value)
    except ValueError:
        member = None
    if member is None or member not in allowed:
        raise invalid_enum(field, value, [m.value for m in allowed])
    return member


def _parse(schema, payload):
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise invalid_input(e.errors(include_url=False, include_context=False, include_input=False)) from e


class GameStore:
    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    # Writes

    def create_game(self) -> GameRecord:
        with transaction(self.session_factory) as db:
            game = logic.create_game(db)
            return to_game_record(game, moves=[], total_moves=0)

    def add_move(self, game_id: int, move) -> MoveRecord:
        """Append a move already checked by the rules engine and advance the turn."""
        move = _parse(MoveCreate, move)
        player = _coerce(Player, "player", move.player)

        with transaction(self.session_factory) as db:
            created = logic.record_move(
                db,
                game_id,
                move_number=move.move_number,
                player=player,
                notation=move.move_notation,
                fen_before=move.fen_before,
                fen_after=move.fen_after,
                pgn=move.pgn,
            )
            return MoveRecord.model_validate(created)

    def complete_game(self, game_id: int, result) -> GameRecord:
        """Finish a game and count its result.

        Whether ``winner`` fits ``status`` is up to the caller.
        """
        result = _parse(GameComplete, result)
        status = _coerce(GameStatus, "status", result.status, TERMINAL_STATUSES)
        winner = _coerce(Winner, "winner", result.winner) if result.winner is not None else None

        with transaction(self.session_factory) as db:
            game = logic.complete_game(db, game_id, status, winner)
            return to_game_record(game)

    # Reads

    def get_game(self, game_id: int) -> GameRecord:
        with transaction(self.session_factory) as db:
            game = queries.get_game(db, game_id)
            if not game:
                raise game_not_found(game_id)
            moves = queries.moves_for_games(db, [game.id])[game.id]
            return to_game_record(game, moves=moves, total_moves=len(moves))

    def list_games(self, limit: int | None = None) -> list[GameRecord]:
        with transaction(self.session_factory) as db:
            rows = queries.recent_games(db, limit)
            moves = queries.moves_for_games(db, [game.id for game, _ in rows])
            return [
                to_game_record(game, moves=moves[game.id], total_moves=total)
                for game, total in rows
            ]

    def ongoing_games(self) -> list[GameRecord]:
        with transaction(self.session_factory) as db:
            return [to_game_record(game) for game in queries.ongoing_games(db)]

    def game_statistics(self) -> GameStatisticsRecord:
        with transaction(self.session_factory) as db:
            return GameStatisticsRecord.model_validate(get_game_statistics(db))

    def aggregate_statistics(self) -> AggregateStatisticsRecord:
        with transaction(self.session_factory) as db:
            stats = get_aggregate_statistics(db)
            if stats is None:
                logger.error("Statistics record missing; was init_db run?")
                raise storage_failure(ErrorCode.STATS_NOT_INITIALIZED, ErrorMessage.STATS_NOT_INITIALIZED)
            return AggregateStatisticsRecord.model_validate(stats)
