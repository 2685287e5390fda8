import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.errors import ErrorCode, ErrorMessage, game_not_found, move_number_regression, storage_failure
from core.models import (
    Game,
    GameStatistics,
    GameStatus,
    Move,
    Player,
    STATISTICS_ID,
    START_FEN,
    WINNER_COUNTERS,
    Winner,
    utcnow,
)

logger = logging.getLogger(__name__)

# Every function here runs inside one core.database.transaction() scope:
# nothing is committed unless all of its statements succeed.


def _bump_statistics(db: Session, counter):
    result = db.execute(
        update(GameStatistics)
        .where(GameStatistics.id == STATISTICS_ID)
        .values({counter: counter + 1, GameStatistics.updated_at: utcnow()})
    )
    if result.rowcount != 1:
        logger.error("Statistics row %s missing; was init_db run?", STATISTICS_ID)
        raise storage_failure(ErrorCode.STATS_NOT_INITIALIZED, ErrorMessage.STATS_NOT_INITIALIZED)


def _locked_game(db: Session, game_id: int) -> Game:
    # Lock the row so concurrent writers on the same game serialize
    game = db.query(Game).filter(Game.id == game_id).with_for_update().first()
    if not game:
        raise game_not_found(game_id)
    return game


def create_game(db: Session) -> Game:
    now = utcnow()
    game = Game(
        fen=START_FEN,
        pgn="",
        status=GameStatus.ACTIVE,
        current_player=Player.WHITE,
        winner=None,
        move_count=0,
        created_at=now,
        updated_at=now,
    )
    db.add(game)
    db.flush()

    _bump_statistics(db, GameStatistics.total_games)

    logger.info("Created game %s", game.id)
    return game


def record_move(
    db: Session,
    game_id: int,
    move_number: int,
    player: Player,
    notation: str,
    fen_before: str,
    fen_after: str,
    pgn: str,
) -> Move:
    game = _locked_game(db, game_id)

    # move_count never goes backwards
    if move_number < game.move_count:
        raise move_number_regression(game.id, move_number, game.move_count)

    # 1. Append the move
    move = Move(
        game_id=game.id,
        move_number=move_number,
        player=player,
        move_notation=notation,
        fen_before=fen_before,
        fen_after=fen_after,
        created_at=utcnow(),
    )
    db.add(move)

    # 2. Advance the game
    game.fen = fen_after
    game.pgn = pgn
    game.current_player = Player(player).opponent
    game.move_count = move_number
    game.updated_at = utcnow()

    db.flush()

    logger.info("Game %s: move %s %s by %s", game.id, move_number, notation, Player(player).value)
    return move


def complete_game(db: Session, game_id: int, status: GameStatus, winner: Winner | None) -> Game:
    game = _locked_game(db, game_id)

    game.status = status
    game.winner = winner
    game.updated_at = utcnow()
    db.flush()

    # abandoned games without a winner leave every counter as it is
    if winner is not None:
        _bump_statistics(db, WINNER_COUNTERS[Winner(winner)])

    logger.info("Game %s finished: %s, winner=%s", game.id, GameStatus(status).value, Winner(winner).value if winner is not None else None)
    return game
