"""Pydantic models for API request/response schemas.

Field names are snake_case in Python and camelCase on the wire, matching the
stored JSON document.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from draft_lottery.data.schema import DraftConfig, DraftLottery, DraftPick, Team, TeamOdds

_CAMEL = ConfigDict(populate_by_name=True)


class TeamModel(BaseModel):
    """League franchise."""

    model_config = _CAMEL

    id: str = Field(..., min_length=1, description="Stable team identifier")
    name: str = Field("", description="Display name")
    logo_url: str = Field("", alias="logoUrl")
    logo_type: Literal["url", "upload"] = Field("url", alias="logoType")

    def to_domain(self) -> Team:
        return Team(id=self.id, name=self.name, logo_url=self.logo_url, logo_type=self.logo_type)


class WeightedOddsModel(BaseModel):
    """Odds entry for one original position."""

    position: int = Field(..., ge=1, description="Original position (1 = champion)")
    percentage: float = Field(..., ge=0.0, description="Share of the lottery weight")


class DraftConfigModel(BaseModel):
    """League configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "numberOfTeams": 3,
                    "numberOfRounds": 2,
                    "teams": [
                        {"id": "team-1", "name": "Knockout Kings"},
                        {"id": "team-2", "name": "Loco Lobos"},
                        {"id": "team-3", "name": "Guardians"},
                    ],
                    "weightedSystem": [
                        {"position": 3, "percentage": 50.0},
                        {"position": 2, "percentage": 30.0},
                        {"position": 1, "percentage": 20.0},
                    ],
                    "pickDelaySeconds": 3,
                    "currentYear": 2026,
                }
            ]
        },
    )

    number_of_teams: int = Field(..., ge=1, alias="numberOfTeams")
    number_of_rounds: int = Field(..., ge=1, alias="numberOfRounds")
    teams: list[TeamModel] = Field(default_factory=list)
    weighted_system: list[WeightedOddsModel] = Field(default_factory=list, alias="weightedSystem")
    pick_delay_seconds: int = Field(3, ge=0, alias="pickDelaySeconds")
    current_year: int = Field(..., alias="currentYear")
    initial_order: list[int] | None = Field(None, alias="initialOrder")

    def to_domain(self) -> DraftConfig:
        return DraftConfig(
            number_of_teams=self.number_of_teams,
            number_of_rounds=self.number_of_rounds,
            teams=[team.to_domain() for team in self.teams],
            weighted_system=[
                TeamOdds(position=odds.position, percentage=odds.percentage)
                for odds in self.weighted_system
            ],
            pick_delay_seconds=self.pick_delay_seconds,
            current_year=self.current_year,
            initial_order=list(self.initial_order) if self.initial_order is not None else None,
        )

    @classmethod
    def from_domain(cls, config: DraftConfig) -> DraftConfigModel:
        return cls.model_validate(config.to_dict())


class DraftPickModel(BaseModel):
    """One team's slot in one round."""

    model_config = _CAMEL

    round: int = Field(..., ge=1)
    pick_number: int = Field(..., ge=1, alias="pickNumber")
    team_id: str = Field(..., alias="teamId")
    original_position: int = Field(..., ge=1, alias="originalPosition")
    movement: int = Field(..., description="Negative = moved up, positive = moved down")

    def to_domain(self) -> DraftPick:
        return DraftPick(
            round=self.round,
            pick_number=self.pick_number,
            team_id=self.team_id,
            original_position=self.original_position,
            movement=self.movement,
        )

    @classmethod
    def from_domain(cls, pick: DraftPick) -> DraftPickModel:
        return cls.model_validate(pick.to_dict())


class DraftLotteryModel(BaseModel):
    """Stored lottery for one season."""

    id: str
    year: int
    date: str = Field(..., description="ISO 8601 timestamp of the draw")
    picks: list[DraftPickModel] = Field(default_factory=list)
    config: DraftConfigModel

    def to_domain(self) -> DraftLottery:
        return DraftLottery(
            id=self.id,
            year=self.year,
            date=self.date,
            picks=[pick.to_domain() for pick in self.picks],
            config=self.config.to_domain(),
        )

    @classmethod
    def from_domain(cls, lottery: DraftLottery) -> DraftLotteryModel:
        return cls.model_validate(lottery.to_dict())


class RunLotteryRequest(BaseModel):
    """Request to draw a full lottery with the stored configuration."""

    model_config = _CAMEL

    initial_order: list[int] | None = Field(
        None, alias="initialOrder", description="Defaults to the saved order, then 1..N"
    )
    save: bool = Field(False, description="Store the result in the lottery history")
    year: int | None = Field(None, description="Season to save under (defaults to currentYear)")
    seed: int | None = Field(None, description="Seed for a reproducible draw")


class MovementSummaryModel(BaseModel):
    up: int
    down: int
    stayed: int
    mean_abs_movement: float = Field(..., alias="meanAbsMovement")

    model_config = _CAMEL


class RunLotteryResponse(BaseModel):
    """Result of a lottery draw."""

    model_config = _CAMEL

    picks: list[DraftPickModel]
    initial_order: list[int] = Field(..., alias="initialOrder")
    movement: MovementSummaryModel
    saved: bool
    lottery: DraftLotteryModel | None = None


class SuccessResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="'healthy' or 'unhealthy'")
    store_path: str
    lotteries_stored: int | None
    uptime_seconds: float


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: str | None = Field(None, description="Detailed error information")
