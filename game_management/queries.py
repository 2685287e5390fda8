from collections import defaultdict

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.config import settings
from core.models import Game, GameStatus, Move


def recent_games(db: Session, limit: int | None = None) -> list[tuple[Game, int]]:
    """Most recently touched games, each with the number of moves stored for it.

    Outer join, so games without any moves come back with a count of 0.
    """
    if limit is None:
        limit = settings.RECENT_GAMES_LIMIT
    return (
        db.query(Game, func.count(Move.id).label("total_moves"))
        .outerjoin(Move, Move.game_id == Game.id)
        .group_by(Game.id)
        .order_by(Game.updated_at.desc(), Game.id.desc())
        .limit(limit)
        .all()
    )


def ongoing_games(db: Session) -> list[Game]:
    return (
        db.query(Game)
        .filter(Game.status == GameStatus.ACTIVE)
        .order_by(Game.updated_at.desc(), Game.id.desc())
        .all()
    )


def get_game(db: Session, game_id: int) -> Game | None:
    return db.query(Game).filter(Game.id == game_id).first()


def moves_for_games(db: Session, game_ids: list[int]) -> dict[int, list[Move]]:
    """Ordered move lists for several games with a single query."""
    grouped = defaultdict(list)
    if not game_ids:
        return grouped

    rows = (
        db.query(Move)
        .filter(Move.game_id.in_(game_ids))
        .order_by(Move.game_id, Move.move_number, Move.id)
        .all()
    )
    for move in rows:
        grouped[move.game_id].append(move)
    return grouped
