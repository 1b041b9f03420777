"""
Data models for normalized match data.

These frozen dataclasses are the canonical shape of match data regardless of
whether it came from SofaScore, Football-Data.org or the mock catalog.
They are built fresh per request and never mutated.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


# SofaScore status codes -> coarse status type, used when a payload carries no type
STATUS_TYPES = {
    0: "notstarted",
    6: "inprogress",    # 1st half
    7: "inprogress",    # 2nd half
    31: "inprogress",   # half-time
    41: "inprogress",   # 1st extra
    42: "inprogress",   # 2nd extra
    50: "inprogress",   # penalties
    60: "postponed",
    70: "canceled",
    80: "interrupted",
    90: "canceled",     # abandoned
    100: "finished",
    110: "finished",    # after extra time
    120: "finished",    # after penalties
}

HALF_TIME_CODE = 31


@dataclass(frozen=True)
class TeamRef:
    """A team as it appears on a match card."""
    id: int
    name: str
    short_name: str

    @property
    def display_name(self) -> str:
        """Short name for compact displays, full name otherwise."""
        return self.short_name or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "shortName": self.short_name}


@dataclass(frozen=True)
class Score:
    """Goals for one side."""
    current: int = 0
    period1: int = 0
    period2: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "display": self.current,
            "period1": self.period1,
            "period2": self.period2,
            "normaltime": self.current,
        }


@dataclass(frozen=True)
class MatchStatus:
    """Match status: numeric code, free-text description ("78'", "HT") and coarse type."""
    code: int
    description: str
    type: str

    @classmethod
    def from_code(cls, code: int, description: str = "", status_type: Optional[str] = None) -> "MatchStatus":
        return cls(
            code=code,
            description=description,
            type=status_type or STATUS_TYPES.get(code, "unknown"),
        )

    @property
    def is_half_time(self) -> bool:
        return self.description.strip().upper() == "HT" or self.code == HALF_TIME_CODE

    @property
    def minute(self) -> str:
        """Description without the trailing minute mark ("78'" -> "78")."""
        return self.description.replace("'", "")

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "description": self.description, "type": self.type}


@dataclass(frozen=True)
class Tournament:
    """Tournament and the competition it belongs to."""
    id: int
    name: str
    unique_id: int
    unique_name: str
    category_id: int = 0
    category_name: str = ""

    @property
    def competition_code(self) -> str:
        """Three-letter competition code ("Premier League" -> "PRE")."""
        return self.unique_name[:3].upper()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "uniqueTournament": {
                "id": self.unique_id,
                "name": self.unique_name,
                "category": {
                    "id": self.category_id,
                    "name": self.category_name,
                    "slug": self.category_name.lower().replace(" ", "-"),
                },
            },
        }


@dataclass(frozen=True)
class Match:
    """A single match snapshot."""
    id: int
    home_team: TeamRef
    away_team: TeamRef
    home_score: Score
    away_score: Score
    status: MatchStatus
    tournament: Tournament

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "homeTeam": self.home_team.to_dict(),
            "awayTeam": self.away_team.to_dict(),
            "homeScore": self.home_score.to_dict(),
            "awayScore": self.away_score.to_dict(),
            "tournament": self.tournament.to_dict(),
            "status": self.status.to_dict(),
        }


@dataclass(frozen=True)
class StatPair:
    """Home/away values of one statistic."""
    home: int
    away: int

    def to_dict(self) -> Dict[str, int]:
        return {"home": self.home, "away": self.away}


def _counter(home: int = 0, away: int = 0) -> StatPair:
    return StatPair(home=max(0, home), away=max(0, away))


def _possession(home: int = 50, away: int = 50) -> StatPair:
    # Clamped to 0..100 each; the 100 total is not enforced
    return StatPair(home=min(100, max(0, home)), away=min(100, max(0, away)))


@dataclass(frozen=True)
class MatchStatistics:
    """Aggregate per-side counters for one period."""
    possession: StatPair = field(default_factory=_possession)
    total_shots: StatPair = field(default_factory=_counter)
    shots_on_target: StatPair = field(default_factory=_counter)
    corners: StatPair = field(default_factory=_counter)
    fouls: StatPair = field(default_factory=_counter)
    yellow_cards: StatPair = field(default_factory=_counter)
    red_cards: StatPair = field(default_factory=_counter)
    period: str = "ALL"

    @classmethod
    def build(cls, values: Dict[str, Tuple[int, int]], period: str = "ALL") -> "MatchStatistics":
        """
        Build from a {field_name: (home, away)} mapping.

        Missing counters default to 0 and missing possession to a 50/50 split.
        """
        kwargs = {"period": period}
        for name in STAT_FIELDS:
            if name not in values:
                continue
            home, away = values[name]
            kwargs[name] = _possession(home, away) if name == "possession" else _counter(home, away)
        return cls(**kwargs)

    def period_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "possession": self.possession.to_dict(),
            "totalShots": self.total_shots.to_dict(),
            "shotsOnTarget": self.shots_on_target.to_dict(),
            "corners": self.corners.to_dict(),
            "fouls": self.fouls.to_dict(),
            "yellowCards": self.yellow_cards.to_dict(),
            "redCards": self.red_cards.to_dict(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"periods": {self.period: self.period_dict()}}


STAT_FIELDS = (
    "possession",
    "total_shots",
    "shots_on_target",
    "corners",
    "fouls",
    "yellow_cards",
    "red_cards",
)


@dataclass(frozen=True)
class LineupPlayer:
    """A player in a lineup."""
    name: str
    position: str  # "GK", "DF", "CB", "G", "M"...
    shirt_number: Optional[int] = None
    substitute: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": {"name": self.name, "position": self.position},
            "shirtNumber": self.shirt_number,
            "substitute": self.substitute,
        }


@dataclass(frozen=True)
class TeamLineup:
    """One side's ordered player list."""
    players: Tuple[LineupPlayer, ...] = ()
    formation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "formation": self.formation,
            "players": [p.to_dict() for p in self.players],
        }


@dataclass(frozen=True)
class Lineups:
    home: TeamLineup
    away: TeamLineup

    def to_dict(self) -> Dict[str, Any]:
        return {"home": self.home.to_dict(), "away": self.away.to_dict()}


INCIDENT_TYPES = ("goal", "card", "penalty")


@dataclass(frozen=True)
class MatchEvent:
    """A single incident (goal, card, penalty)."""
    minute: int
    is_home: bool
    player_name: str
    incident_type: str
    incident_class: str  # "regular", "yellow", "red", "scored", "missed"...

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.minute,
            "isHome": self.is_home,
            "player": {"name": self.player_name},
            "incidentType": self.incident_type,
            "incidentClass": self.incident_class,
        }


@dataclass(frozen=True)
class HeadToHead:
    """Head-to-head summary attached to Football-Data match details."""
    number_of_matches: int
    total_goals: int
    home_wins: int
    draws: int
    away_wins: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numberOfMatches": self.number_of_matches,
            "totalGoals": self.total_goals,
            "homeTeam": {"wins": self.home_wins, "draws": self.draws, "losses": self.away_wins},
            "awayTeam": {"wins": self.away_wins, "draws": self.draws, "losses": self.home_wins},
        }
