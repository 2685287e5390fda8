import pytest
from sqlalchemy.exc import OperationalError

from core import init_db as init_db_module
from core.init_db import ensure_statistics, init_db
from core.database import Base


def test_ensure_statistics_is_idempotent(session_factory, store):
    for _ in range(3):
        store.create_game()
    game = store.create_game()
    store.complete_game(game.id, {"status": "checkmate", "winner": "black"})
    before = store.aggregate_statistics()

    for _ in range(5):
        assert ensure_statistics(session_factory) is False

    after = store.aggregate_statistics()
    assert after.total_games == before.total_games == 4
    assert after.black_wins == before.black_wins == 1
    assert after.white_wins == after.draws == 0


def test_ensure_statistics_creates_zeroed_row(uninitialized_store, session_factory):
    assert ensure_statistics(session_factory) is True

    stats = uninitialized_store.aggregate_statistics()
    assert (stats.total_games, stats.white_wins, stats.black_wins, stats.draws) == (0, 0, 0, 0)


def test_init_db_creates_schema_and_statistics(engine, session_factory, uninitialized_store):
    init_db(bind=engine, session_factory=session_factory)
    init_db(bind=engine, session_factory=session_factory)

    assert uninitialized_store.aggregate_statistics().total_games == 0


def test_init_db_retries_until_database_is_up(engine, session_factory, monkeypatch):
    calls = []
    real_create_all = Base.metadata.create_all

    def flaky_create_all(bind):
        calls.append(bind)
        if len(calls) < 3:
            raise OperationalError("CREATE TABLE", {}, Exception("connection refused"))
        real_create_all(bind=bind)

    monkeypatch.setattr(init_db_module.Base.metadata, "create_all", flaky_create_all)
    sleeps = []

    init_db(bind=engine, session_factory=session_factory, attempts=5, sleep=sleeps.append)

    assert len(calls) == 3
    assert sleeps == [2, 4]


def test_init_db_gives_up(engine, session_factory, monkeypatch):
    def down(bind):
        raise OperationalError("CREATE TABLE", {}, Exception("connection refused"))

    monkeypatch.setattr(init_db_module.Base.metadata, "create_all", down)

    with pytest.raises(RuntimeError):
        init_db(bind=engine, session_factory=session_factory, attempts=2, sleep=lambda _: None)
