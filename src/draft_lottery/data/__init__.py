"""Domain records and the JSON-file store."""

from draft_lottery.data.schema import (
    DraftConfig,
    DraftLottery,
    DraftPick,
    Team,
    TeamOdds,
    default_config,
    odds_table,
    sample_teams,
)
from draft_lottery.data.store import LotteryStore, StoreError

__all__ = [
    "DraftConfig",
    "DraftLottery",
    "DraftPick",
    "LotteryStore",
    "StoreError",
    "Team",
    "TeamOdds",
    "default_config",
    "odds_table",
    "sample_teams",
]
