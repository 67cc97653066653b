"""Movement statistics and odds simulation for lottery results."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from tqdm import tqdm

from draft_lottery.config import LotteryRules
from draft_lottery.data.schema import DraftConfig, DraftPick
from draft_lottery.engine.lottery import check_initial_order, run_lottery_round

PICK_COLUMNS = ["round", "pick_number", "team_id", "original_position", "movement"]


@dataclass
class MovementSummary:
    """How many picks moved up, moved down or stayed put."""

    up: int
    down: int
    stayed: int
    mean_abs_movement: float

    @property
    def total(self) -> int:
        return self.up + self.down + self.stayed


def summarize_movements(picks: Sequence[DraftPick]) -> MovementSummary:
    if not picks:
        return MovementSummary(up=0, down=0, stayed=0, mean_abs_movement=0.0)

    movements = np.array([pick.movement for pick in picks], dtype=int)
    return MovementSummary(
        up=int(np.sum(movements < 0)),
        down=int(np.sum(movements > 0)),
        stayed=int(np.sum(movements == 0)),
        mean_abs_movement=float(np.mean(np.abs(movements))),
    )


def picks_to_frame(picks: Iterable[DraftPick], team_names: dict[str, str] | None = None) -> pd.DataFrame:
    """Tabulate picks, one row per pick, ordered by round then pick number."""
    frame = pd.DataFrame(
        [
            [pick.round, pick.pick_number, pick.team_id, pick.original_position, pick.movement]
            for pick in picks
        ],
        columns=PICK_COLUMNS,
    )
    if team_names is not None:
        frame["team_name"] = frame["team_id"].map(team_names).fillna("")
    return frame.sort_values(["round", "pick_number"], ignore_index=True)


def simulate_position_odds(
    config: DraftConfig,
    initial_order: Sequence[int],
    trials: int = 1000,
    *,
    rules: LotteryRules | None = None,
    seed: int | None = None,
    progress: bool = False,
) -> np.ndarray:
    """Estimate where each original position ends up.

    Draws ``trials`` single rounds and returns an N x N matrix whose row ``p - 1``
    holds the observed probability of original position ``p`` finishing at each
    pick number. Rows sum to 1.
    """
    if trials < 1:
        raise ValueError(f"trials must be >= 1, got {trials}")
    check_initial_order(config, initial_order)

    n = config.number_of_teams
    counts = np.zeros((n, n), dtype=float)
    rng = random.Random(seed)

    for _ in tqdm(range(trials), desc="Simulating rounds", disable=not progress):
        for pick in run_lottery_round(config, 1, initial_order, rules=rules, rng=rng):
            counts[pick.original_position - 1, pick.pick_number - 1] += 1

    return counts / trials
