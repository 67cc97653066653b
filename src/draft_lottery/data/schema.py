"""Domain records for the draft lottery.

The dataclasses here are what the engine, the store and the API pass around.
``from_dict``/``to_dict`` keep the camelCase field names of the stored JSON
document so existing ``database.json`` files load unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence

logger = logging.getLogger("draft_lottery.data.schema")


@dataclass
class Team:
    """A league franchise."""

    id: str
    name: str
    logo_url: str = ""
    logo_type: str = "url"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Team:
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            logo_url=str(payload.get("logoUrl", "")),
            logo_type=str(payload.get("logoType", "url")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "logoUrl": self.logo_url,
            "logoType": self.logo_type,
        }


@dataclass(frozen=True)
class TeamOdds:
    """Weighted odds for one original position (1 = champion, N = worst)."""

    position: int
    percentage: float

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> TeamOdds:
        return cls(position=int(payload["position"]), percentage=float(payload["percentage"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position, "percentage": self.percentage}


def odds_table(entries: Sequence[TeamOdds]) -> Dict[int, float]:
    """Key an odds list by original position.

    A duplicated position keeps the first entry, matching a first-match lookup.
    """
    table: Dict[int, float] = {}
    for entry in entries:
        if entry.position in table:
            logger.warning(f"Duplicate odds entry for position {entry.position} ignored")
            continue
        table[entry.position] = entry.percentage
    return table


@dataclass
class DraftConfig:
    """League setup the lottery runs against.

    ``teams[p - 1]`` is the team holding original position ``p``.
    ``pick_delay_seconds`` only matters to the reveal animation of a front end.
    """

    number_of_teams: int
    number_of_rounds: int
    teams: List[Team]
    weighted_system: List[TeamOdds]
    pick_delay_seconds: int = 3
    current_year: int = field(default_factory=lambda: date.today().year)
    initial_order: List[int] | None = None

    def odds_by_position(self) -> Dict[int, float]:
        return odds_table(self.weighted_system)

    def team_id_for(self, position: int) -> str:
        """Return the id of the team at an original position (1-based)."""
        if not 1 <= position <= len(self.teams):
            raise ValueError(
                f"No team configured for original position {position} "
                f"({len(self.teams)} teams configured)"
            )
        return self.teams[position - 1].id

    def default_order(self) -> List[int]:
        """Saved initial order, or the identity order 1..N."""
        if self.initial_order:
            return list(self.initial_order)
        return list(range(1, self.number_of_teams + 1))

    def copy(self) -> DraftConfig:
        return replace(
            self,
            teams=[replace(team) for team in self.teams],
            weighted_system=list(self.weighted_system),
            initial_order=list(self.initial_order) if self.initial_order is not None else None,
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DraftConfig:
        initial_order = payload.get("initialOrder")
        return cls(
            number_of_teams=int(payload["numberOfTeams"]),
            number_of_rounds=int(payload["numberOfRounds"]),
            teams=[Team.from_dict(team) for team in payload.get("teams", [])],
            weighted_system=[TeamOdds.from_dict(odds) for odds in payload.get("weightedSystem", [])],
            pick_delay_seconds=int(payload.get("pickDelaySeconds", 3)),
            current_year=int(payload.get("currentYear", date.today().year)),
            initial_order=[int(p) for p in initial_order] if initial_order is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "numberOfTeams": self.number_of_teams,
            "numberOfRounds": self.number_of_rounds,
            "teams": [team.to_dict() for team in self.teams],
            "weightedSystem": [odds.to_dict() for odds in self.weighted_system],
            "pickDelaySeconds": self.pick_delay_seconds,
            "currentYear": self.current_year,
        }
        if self.initial_order is not None:
            payload["initialOrder"] = list(self.initial_order)
        return payload


@dataclass(frozen=True)
class DraftPick:
    """One team's slot in one round.

    movement is ``pick_number - original_position``: negative moved up,
    positive moved down, 0 stayed.
    """

    round: int
    pick_number: int
    team_id: str
    original_position: int
    movement: int

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DraftPick:
        return cls(
            round=int(payload["round"]),
            pick_number=int(payload["pickNumber"]),
            team_id=str(payload["teamId"]),
            original_position=int(payload["originalPosition"]),
            movement=int(payload["movement"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": self.round,
            "pickNumber": self.pick_number,
            "teamId": self.team_id,
            "originalPosition": self.original_position,
            "movement": self.movement,
        }


@dataclass
class DraftLottery:
    """A stored lottery result for one season."""

    id: str
    year: int
    date: str
    picks: List[DraftPick]
    config: DraftConfig

    @classmethod
    def create(
        cls,
        year: int,
        picks: Sequence[DraftPick],
        config: DraftConfig,
        initial_order: Sequence[int],
        drawn_at: datetime | None = None,
    ) -> DraftLottery:
        """Build the stored record for a draw, snapshotting the config it used."""
        snapshot = config.copy()
        snapshot.initial_order = list(initial_order)
        drawn_at = drawn_at or datetime.now(timezone.utc)
        return cls(
            id=f"lottery-{year}",
            year=year,
            date=drawn_at.isoformat(),
            picks=list(picks),
            config=snapshot,
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DraftLottery:
        return cls(
            id=str(payload["id"]),
            year=int(payload["year"]),
            date=str(payload["date"]),
            picks=[DraftPick.from_dict(pick) for pick in payload.get("picks", [])],
            config=DraftConfig.from_dict(payload["config"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "year": self.year,
            "date": self.date,
            "picks": [pick.to_dict() for pick in self.picks],
            "config": self.config.to_dict(),
        }


_LOGO_HOST = "https://www47.myfantasyleague.com"

DEFAULT_TEAMS = [
    ("team-1", "Knockout Kings", f"{_LOGO_HOST}/fflnetdynamic2024/58890_franchise_icon0001.png"),
    ("team-2", "Operation BlackRhino", f"{_LOGO_HOST}/fflnetdynamic2024/58890_franchise_icon0002.jpg"),
    ("team-3", "Loco Lobos", f"{_LOGO_HOST}/fflnetdynamic2024/58890_franchise_icon0003.png"),
    ("team-4", "Buck Hunters", f"{_LOGO_HOST}/fflnetdynamic2023/58890_franchise_icon0004.jpg"),
    ("team-5", "Chieftains", f"{_LOGO_HOST}/fflnetdynamic2024/58890_franchise_icon0005.png"),
    ("team-6", "Redskin Nation", f"{_LOGO_HOST}/fflnetdynamic2022/72440_franchise_icon0006.png"),
    ("team-7", "Whiskey Warriors", f"{_LOGO_HOST}/fflnetdynamic2022/72440_franchise_icon0007.png"),
    ("team-8", "Gorilla Warefare Klan", f"{_LOGO_HOST}/fflnetdynamic2022/72440_franchise_icon0008.png"),
    ("team-9", "Evil Engineers", f"{_LOGO_HOST}/fflnetdynamic2022/72440_franchise_icon0009.jpg"),
    ("team-10", "Guardians", f"{_LOGO_HOST}/fflnetdynamic2024/58890_franchise_icon0010.png"),
]

# Placeholder league used when seeding history into a config without teams
SAMPLE_TEAMS = [
    ("team-1", "Thunderbolts", "FF6B6B", "TB"),
    ("team-2", "Storm Chasers", "4ECDC4", "SC"),
    ("team-3", "Iron Giants", "45B7D1", "IG"),
    ("team-4", "Phoenix Rising", "F7DC6F", "PR"),
    ("team-5", "Midnight Wolves", "BB8FCE", "MW"),
    ("team-6", "Golden Eagles", "F8B739", "GE"),
    ("team-7", "Silver Sharks", "85C1E2", "SS"),
    ("team-8", "Crimson Tide", "E74C3C", "CT"),
    ("team-9", "Emerald Knights", "27AE60", "EK"),
    ("team-10", "Dynasty Dragons", "8E44AD", "DD"),
]

# Worst team (10) gets the biggest share, the champion (1) the smallest
DEFAULT_ODDS = [
    (10, 25.0),
    (9, 18.8),
    (8, 14.1),
    (7, 10.5),
    (6, 7.9),
    (5, 6.2),
    (4, 6.2),
    (3, 4.7),
    (2, 3.5),
    (1, 3.1),
]


def default_config() -> DraftConfig:
    """The ten-team, five-round league a fresh database starts with."""
    return DraftConfig(
        number_of_teams=len(DEFAULT_TEAMS),
        number_of_rounds=5,
        teams=[Team(id=team_id, name=name, logo_url=logo) for team_id, name, logo in DEFAULT_TEAMS],
        weighted_system=[TeamOdds(position=p, percentage=pct) for p, pct in DEFAULT_ODDS],
        pick_delay_seconds=3,
        current_year=date.today().year,
    )


def sample_teams() -> List[Team]:
    """Placeholder teams with generated badge logos."""
    return [
        Team(
            id=team_id,
            name=name,
            logo_url=f"https://via.placeholder.com/100/{color}/FFFFFF?text={initials}",
        )
        for team_id, name, color, initials in SAMPLE_TEAMS
    ]
