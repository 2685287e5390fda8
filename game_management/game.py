from typing import List

from fastapi import APIRouter, Body, Depends

from game_management.dependencies import get_store
from game_management.store import GameStore
from game_management.game_schema import GameRecord, MoveRecord

router = APIRouter(tags=["Games"])


# Routes

@router.post("", response_model=GameRecord)
def create_game(store: GameStore = Depends(get_store)):
    return store.create_game()


@router.get("", response_model=List[GameRecord])
def list_games(store: GameStore = Depends(get_store)):
    return store.list_games()


@router.get("/active", response_model=List[GameRecord])
def get_active_games(store: GameStore = Depends(get_store)):
    return store.ongoing_games()


@router.get("/{game_id}", response_model=GameRecord)
def get_game(game_id: int, store: GameStore = Depends(get_store)):
    return store.get_game(game_id)


# Bodies are taken raw so length/shape problems surface as ValidationFailure (400)
@router.post("/{game_id}/moves", response_model=MoveRecord)
def make_move(
    game_id: int,
    req: dict = Body(...),
    store: GameStore = Depends(get_store),
):
    return store.add_move(game_id, req)


@router.post("/{game_id}/complete", response_model=GameRecord)
def complete_game(
    game_id: int,
    req: dict = Body(...),
    store: GameStore = Depends(get_store),
):
    return store.complete_game(game_id, req)
