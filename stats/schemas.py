from pydantic import BaseModel

from game_management.game_schema import AggregateStatisticsRecord, GameStatisticsRecord


class StatsResponse(BaseModel):
    success: bool = True
    games: GameStatisticsRecord
    totals: AggregateStatisticsRecord
