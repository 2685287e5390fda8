from fastapi import APIRouter, Depends

from game_management.dependencies import get_store
from game_management.store import GameStore
from stats.schemas import StatsResponse

router = APIRouter(prefix="/api/stats", tags=["Statistics"])


@router.get("", response_model=StatsResponse)
def dashboard(store: GameStore = Depends(get_store)):
    return {
        "success": True,
        "games": store.game_statistics(),
        "totals": store.aggregate_statistics(),
    }
