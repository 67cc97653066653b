"""Constraint-satisfaction draft lottery.

Every team ends a round within ``max_movement`` spots of its original position.
Inside that window the final slot is drawn at random, weighted by the team's
odds and tilted towards moving up. A round is drawn by shuffling the teams,
placing them greedily one at a time and starting over whenever a team is left
without a free slot in its window. If a round still fails after
``max_attempts`` tries the no-movement order is returned (or, under strict
rules, an error is raised).
"""

from __future__ import annotations

import logging
import operator
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Sequence

from draft_lottery.config import MAX_MOVEMENT, LotteryRules
from draft_lottery.data.schema import DraftConfig, DraftPick
from draft_lottery.engine.errors import (
    InitialOrderError,
    LotteryExhaustedError,
    LotteryValidationError,
    MissingOddsError,
    NoValidPositionError,
    SelectionError,
)

logger = logging.getLogger("draft_lottery.engine.lottery")

# Weight change per spot moved: +20% per spot up, -20% per spot down
MOVEMENT_WEIGHT_STEP = 0.2

_default_rng = random.Random()


@dataclass(frozen=True)
class PositionRange:
    """Closed interval of final positions a team may land on."""

    min: int
    max: int

    def __contains__(self, position: object) -> bool:
        # Any integer type counts (numpy included); bools are not positions
        if isinstance(position, bool):
            return False
        try:
            value = operator.index(position)
        except TypeError:
            return False
        return self.min <= value <= self.max


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class _RoundEntry:
    original_position: int
    team_id: str


def valid_position_range(
    original_position: int, total_teams: int, *, max_movement: int = MAX_MOVEMENT
) -> PositionRange:
    """Positions a team starting at ``original_position`` may finish in."""
    return PositionRange(
        min=max(1, original_position - max_movement),
        max=min(total_teams, original_position + max_movement),
    )


def validate_draft_results(
    picks: Iterable[DraftPick], *, max_movement: int = MAX_MOVEMENT
) -> ValidationResult:
    """Check every pick against the movement cap."""
    errors = [
        f"Team at original position {pick.original_position} moved {abs(pick.movement)} spots "
        f"(max allowed: {max_movement})"
        for pick in picks
        if abs(pick.movement) > max_movement
    ]
    return ValidationResult(valid=not errors, errors=errors)


def weighted_random_selection(
    available_positions: Sequence[int],
    weighted_odds: Mapping[int, float],
    original_position: int,
    *,
    total_teams: int | None = None,
    max_movement: int = MAX_MOVEMENT,
    rng: random.Random | None = None,
) -> int:
    """Draw a final position for one team.

    Candidates are the available positions inside the team's movement window,
    kept in the order they were given. Each candidate starts from the team's
    odds percentage, scaled by ``1 + 0.2 * spots`` when it moves the team up and
    ``1 - 0.2 * spots`` when it moves the team down.

    Args:
        available_positions: Positions not yet taken in this round
        weighted_odds: Odds percentage keyed by original position
        original_position: The team's original position
        total_teams: League size; defaults to the size of the odds table
        max_movement: Movement cap
        rng: Random source (a shared generator when omitted)

    Returns:
        The selected position

    Raises:
        NoValidPositionError: No available position lies within the window
        MissingOddsError: More than one candidate and no odds for the team
    """
    if total_teams is None:
        total_teams = len(weighted_odds)

    window = valid_position_range(original_position, total_teams, max_movement=max_movement)
    candidates = [operator.index(pos) for pos in available_positions if pos in window]

    if not candidates:
        raise NoValidPositionError(original_position)

    if len(candidates) == 1:
        return candidates[0]

    base = weighted_odds.get(original_position)
    if base is None:
        raise MissingOddsError(original_position)

    weights = []
    for pos in candidates:
        spots_up = original_position - pos
        weight = float(base)
        if spots_up > 0:
            weight *= 1 + spots_up * MOVEMENT_WEIGHT_STEP
        elif spots_up < 0:
            weight *= 1 - abs(spots_up) * MOVEMENT_WEIGHT_STEP
        # Windows wider than 4 spots would otherwise go negative
        weights.append(max(weight, 0.0))

    total_weight = sum(weights)
    if total_weight <= 0:
        logger.debug(
            f"Zero total weight for original position {original_position}; "
            f"taking first candidate {candidates[0]}"
        )
        return candidates[0]

    draw = (rng or _default_rng).random()
    cumulative = 0.0
    for pos, weight in zip(candidates, weights):
        cumulative += weight / total_weight
        if draw <= cumulative:
            return pos

    # Rounding left the draw above the last cumulative value
    return candidates[0]


def _round_entries(config: DraftConfig, initial_order: Sequence[int]) -> List[_RoundEntry]:
    entries = []
    for original_position in initial_order:
        try:
            team_id = config.team_id_for(original_position)
        except ValueError as exc:
            raise InitialOrderError(str(exc)) from exc
        entries.append(_RoundEntry(original_position=original_position, team_id=team_id))
    return entries


def _identity_round(round_number: int, entries: Sequence[_RoundEntry]) -> List[DraftPick]:
    picks = [
        DraftPick(
            round=round_number,
            pick_number=entry.original_position,
            team_id=entry.team_id,
            original_position=entry.original_position,
            movement=0,
        )
        for entry in entries
    ]
    return sorted(picks, key=lambda pick: pick.pick_number)


def run_lottery_round(
    config: DraftConfig,
    round_number: int,
    initial_order: Sequence[int],
    *,
    rules: LotteryRules | None = None,
    rng: random.Random | None = None,
) -> List[DraftPick]:
    """Draw the final order for one round.

    Returns one pick per team sorted by pick number. Never fails for a config
    with a team and an odds entry for every position: if no attempt succeeds the
    teams keep their original positions. With ``rules.strict`` that case raises
    ``LotteryExhaustedError`` instead.
    """
    rules = rules or LotteryRules()
    rng = rng or _default_rng
    total_teams = config.number_of_teams
    odds = config.odds_by_position()
    entries = _round_entries(config, initial_order)

    for attempt in range(1, rules.max_attempts + 1):
        processing_order = list(entries)
        rng.shuffle(processing_order)

        assigned: set[int] = set()
        picks: List[DraftPick] = []
        try:
            for entry in processing_order:
                available = [pos for pos in range(1, total_teams + 1) if pos not in assigned]
                selected = weighted_random_selection(
                    available,
                    odds,
                    entry.original_position,
                    total_teams=total_teams,
                    max_movement=rules.max_movement,
                    rng=rng,
                )
                assigned.add(selected)
                picks.append(
                    DraftPick(
                        round=round_number,
                        pick_number=selected,
                        team_id=entry.team_id,
                        original_position=entry.original_position,
                        movement=selected - entry.original_position,
                    )
                )
        except SelectionError as exc:
            logger.debug(f"Round {round_number} attempt {attempt} abandoned: {exc}")
            continue

        if all(abs(pick.movement) <= rules.max_movement for pick in picks):
            logger.debug(f"Round {round_number} drawn in {attempt} attempt(s)")
            return sorted(picks, key=lambda pick: pick.pick_number)

        logger.debug(f"Round {round_number} attempt {attempt} broke the movement cap")

    if rules.strict:
        raise LotteryExhaustedError(round_number, rules.max_attempts)

    logger.warning(
        f"Round {round_number}: no valid draw after {rules.max_attempts} attempts, "
        "keeping original order. Check the weighted odds table."
    )
    return _identity_round(round_number, entries)


def check_initial_order(config: DraftConfig, initial_order: Sequence[int]) -> None:
    if len(initial_order) != config.number_of_teams:
        raise InitialOrderError(
            f"Initial order length ({len(initial_order)}) must match number of teams "
            f"({config.number_of_teams})"
        )

    out_of_range = [pos for pos in initial_order if not 1 <= pos <= config.number_of_teams]
    if out_of_range:
        raise InitialOrderError(
            f"Initial order contains positions outside 1..{config.number_of_teams}: {out_of_range}"
        )

    if len(set(initial_order)) != len(initial_order):
        duplicates = sorted({pos for pos in initial_order if initial_order.count(pos) > 1})
        raise InitialOrderError(f"Initial order repeats positions: {duplicates}")


def run_complete_lottery(
    config: DraftConfig,
    initial_order: Sequence[int],
    *,
    rules: LotteryRules | None = None,
    rng: random.Random | None = None,
) -> List[DraftPick]:
    """Draw every round of the draft.

    Raises:
        InitialOrderError: The initial order is not a permutation of 1..N
        LotteryValidationError: A round came back breaking the movement cap
    """
    rules = rules or LotteryRules()
    check_initial_order(config, initial_order)

    logger.info(
        f"Running lottery: {config.number_of_teams} teams, {config.number_of_rounds} rounds, "
        f"max movement {rules.max_movement}"
    )

    all_picks: List[DraftPick] = []
    for round_number in range(1, config.number_of_rounds + 1):
        round_picks = run_lottery_round(config, round_number, initial_order, rules=rules, rng=rng)

        validation = validate_draft_results(round_picks, max_movement=rules.max_movement)
        if not validation.valid:
            raise LotteryValidationError(round_number, validation.errors)

        all_picks.extend(round_picks)

    logger.info(f"Lottery complete: {len(all_picks)} picks")
    return all_picks
