"""Draft Lottery - weighted draft-order lottery with a movement cap.

Each round, every team lands on a final pick no more than ``max_movement``
spots (2 by default) from its original position. Within that window the slot
is drawn at random, weighted by a per-position odds table that favours the
worst teams and tilts every team towards moving up.

Key Components:
    - Lottery engine (movement windows, weighted draws, round assignment)
    - JSON-file store for the league configuration and lottery history
    - FastAPI server and Typer CLI
    - Movement statistics and Monte-Carlo odds simulation

Example:
    >>> from draft_lottery import default_config, run_complete_lottery
    >>>
    >>> config = default_config()
    >>> picks = run_complete_lottery(config, list(range(1, 11)))
    >>> len(picks)
    50
"""

from draft_lottery.config import Config, LotteryRules, get_config
from draft_lottery.data.schema import (
    DraftConfig,
    DraftLottery,
    DraftPick,
    Team,
    TeamOdds,
    default_config,
)
from draft_lottery.data.store import LotteryStore
from draft_lottery.engine import (
    run_complete_lottery,
    run_lottery_round,
    valid_position_range,
    validate_draft_results,
    weighted_random_selection,
)

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "Config",
    "LotteryRules",
    "get_config",
    # Data structures
    "DraftConfig",
    "DraftLottery",
    "DraftPick",
    "Team",
    "TeamOdds",
    "default_config",
    "LotteryStore",
    # Engine
    "run_complete_lottery",
    "run_lottery_round",
    "valid_position_range",
    "validate_draft_results",
    "weighted_random_selection",
]
