"""Exceptions raised by the lottery engine."""

from __future__ import annotations


class LotteryError(Exception):
    """Base class for lottery engine failures."""


class InitialOrderError(LotteryError, ValueError):
    """The initial order cannot be mapped onto the configured teams."""


class SelectionError(LotteryError):
    """A weighted selection could not place a team. Retried by the round loop."""


class NoValidPositionError(SelectionError):
    """No unassigned position lies within the team's movement window."""

    def __init__(self, original_position: int):
        self.original_position = original_position
        super().__init__(
            f"No valid positions available for team at original position {original_position}"
        )


class MissingOddsError(SelectionError):
    """The odds table has no entry for an original position."""

    def __init__(self, original_position: int):
        self.original_position = original_position
        super().__init__(f"No weighted odds found for position {original_position}")


class LotteryExhaustedError(LotteryError):
    """A round ran out of attempts while strict rules were in force."""

    def __init__(self, round_number: int, attempts: int):
        self.round_number = round_number
        self.attempts = attempts
        super().__init__(
            f"Round {round_number} could not be drawn in {attempts} attempts; "
            "check the weighted odds table"
        )


class LotteryValidationError(LotteryError, RuntimeError):
    """A drawn round broke the movement cap."""

    def __init__(self, round_number: int, errors: list[str]):
        self.round_number = round_number
        self.errors = list(errors)
        super().__init__(
            f"Invalid lottery results for round {round_number}: {', '.join(self.errors)}"
        )
