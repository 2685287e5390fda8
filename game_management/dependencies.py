from core.database import SessionLocal
from game_management.store import GameStore

_store = GameStore(SessionLocal)


def get_store() -> GameStore:
    return _store
