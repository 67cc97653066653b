"""Lottery engine: movement windows, weighted draws and round assignment."""

from draft_lottery.engine.errors import (
    InitialOrderError,
    LotteryError,
    LotteryExhaustedError,
    LotteryValidationError,
    MissingOddsError,
    NoValidPositionError,
    SelectionError,
)
from draft_lottery.engine.lottery import (
    PositionRange,
    ValidationResult,
    check_initial_order,
    run_complete_lottery,
    run_lottery_round,
    valid_position_range,
    validate_draft_results,
    weighted_random_selection,
)

__all__ = [
    "InitialOrderError",
    "LotteryError",
    "LotteryExhaustedError",
    "LotteryValidationError",
    "MissingOddsError",
    "NoValidPositionError",
    "PositionRange",
    "SelectionError",
    "ValidationResult",
    "check_initial_order",
    "run_complete_lottery",
    "run_lottery_round",
    "valid_position_range",
    "validate_draft_results",
    "weighted_random_selection",
]
