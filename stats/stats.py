from sqlalchemy.orm import Session
from sqlalchemy import func, case

from core.models import DECIDED_STATUSES, Game, GameStatistics, STATISTICS_ID, Winner


def get_game_statistics(db: Session) -> dict:
    """Win/draw breakdown over finished games (abandoned ones excluded)."""
    total, white_wins, black_wins, draws, average_moves = (
        db.query(
            func.count(Game.id),
            func.coalesce(func.sum(case((Game.winner == Winner.WHITE, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Game.winner == Winner.BLACK, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Game.winner == Winner.DRAW, 1), else_=0)), 0),
            func.avg(Game.move_count),
        )
        .filter(Game.status.in_(DECIDED_STATUSES))
        .one()
    )

    return {
        "total_games": int(total),
        "white_wins": int(white_wins),
        "black_wins": int(black_wins),
        "draws": int(draws),
        # AVG over no rows is NULL; keep it that way
        "average_moves": float(average_moves) if average_moves is not None else None,
    }


def get_aggregate_statistics(db: Session) -> GameStatistics | None:
    return db.get(GameStatistics, STATISTICS_ID)
