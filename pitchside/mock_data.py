"""
Static mock catalog served when a live provider is unavailable or not configured.

The raw records below are shaped like SofaScore payloads; `load_mock_catalog`
runs them through the normalizer once and freezes the result into a
`MockCatalog` that is shared read-only across requests.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from pitchside.models import (
    HeadToHead,
    Lineups,
    Match,
    MatchEvent,
    MatchStatistics,
)
from pitchside import normalizer

logger = logging.getLogger("pitchside.mock_data")


def _tournament(tid: int, name: str, country: str) -> dict:
    return {
        "id": tid,
        "name": name,
        "uniqueTournament": {
            "id": tid,
            "name": name,
            "category": {"id": tid, "name": country, "slug": country.lower()},
        },
    }


RAW_MATCHES = (
    {
        "id": 10001,
        "homeTeam": {"id": 1, "name": "Manchester United", "shortName": "MUN"},
        "awayTeam": {"id": 2, "name": "Liverpool", "shortName": "LIV"},
        "tournament": _tournament(1, "Premier League", "England"),
        "status": {"description": "78'", "code": 1, "type": "inprogress"},
        "homeScore": {"current": 2},
        "awayScore": {"current": 1},
    },
    {
        "id": 10002,
        "homeTeam": {"id": 3, "name": "Barcelona", "shortName": "BAR"},
        "awayTeam": {"id": 4, "name": "Real Madrid", "shortName": "RMA"},
        "tournament": _tournament(2, "La Liga", "Spain"),
        "status": {"description": "12'", "code": 1, "type": "inprogress"},
        "homeScore": {"current": 0},
        "awayScore": {"current": 0},
    },
    {
        "id": 10003,
        "homeTeam": {"id": 5, "name": "Bayern Munich", "shortName": "BAY"},
        "awayTeam": {"id": 6, "name": "Borussia Dortmund", "shortName": "DOR"},
        "tournament": _tournament(3, "Bundesliga", "Germany"),
        "status": {"description": "HT", "code": 1, "type": "inprogress"},
        "homeScore": {"current": 3},
        "awayScore": {"current": 2},
    },
    {
        "id": 10004,
        "homeTeam": {"id": 7, "name": "PSG", "shortName": "PSG"},
        "awayTeam": {"id": 8, "name": "Marseille", "shortName": "MAR"},
        "tournament": _tournament(4, "Ligue 1", "France"),
        "status": {"description": "56'", "code": 1, "type": "inprogress"},
        "homeScore": {"current": 1},
        "awayScore": {"current": 1},
    },
    {
        "id": 10005,
        "homeTeam": {"id": 9, "name": "Juventus", "shortName": "JUV"},
        "awayTeam": {"id": 10, "name": "AC Milan", "shortName": "MIL"},
        "tournament": _tournament(5, "Serie A", "Italy"),
        "status": {"description": "89'", "code": 1, "type": "inprogress"},
        "homeScore": {"current": 0},
        "awayScore": {"current": 2},
    },
)

# (home, away) per statistic
RAW_STATISTICS = {
    10001: {
        "possession": (45, 55),
        "total_shots": (12, 15),
        "shots_on_target": (5, 7),
        "corners": (4, 6),
        "fouls": (10, 8),
        "yellow_cards": (2, 3),
        "red_cards": (0, 0),
    },
    10002: {
        "possession": (60, 40),
        "total_shots": (3, 2),
        "shots_on_target": (1, 0),
        "corners": (1, 1),
        "fouls": (2, 3),
        "yellow_cards": (0, 1),
        "red_cards": (0, 0),
    },
    10003: {
        "possession": (52, 48),
        "total_shots": (10, 8),
        "shots_on_target": (6, 4),
        "corners": (5, 3),
        "fouls": (7, 9),
        "yellow_cards": (1, 2),
        "red_cards": (0, 0),
    },
    10004: {
        "possession": (65, 35),
        "total_shots": (14, 6),
        "shots_on_target": (5, 3),
        "corners": (7, 2),
        "fouls": (8, 12),
        "yellow_cards": (1, 3),
        "red_cards": (0, 0),
    },
    10005: {
        "possession": (40, 60),
        "total_shots": (8, 16),
        "shots_on_target": (2, 8),
        "corners": (3, 9),
        "fouls": (14, 6),
        "yellow_cards": (3, 1),
        "red_cards": (1, 0),
    },
}

# Neutral block for ids without a statistics record
DEFAULT_STATISTICS = {
    "possession": (50, 50),
    "total_shots": (10, 10),
    "shots_on_target": (5, 5),
    "corners": (5, 5),
    "fouls": (10, 10),
    "yellow_cards": (1, 1),
    "red_cards": (0, 0),
}


def _squad(players):
    return [
        {"player": {"name": name, "position": position}, "shirtNumber": number}
        for name, position, number in players
    ]


RAW_LINEUPS = {
    10001: {
        "home": {
            "formation": "4-3-3",
            "players": _squad([
                ("De Gea", "GK", 1),
                ("Wan-Bissaka", "RB", 29),
                ("Varane", "CB", 19),
                ("Maguire", "CB", 5),
                ("Shaw", "LB", 23),
                ("Casemiro", "CDM", 18),
                ("Fernandes", "CAM", 8),
                ("Eriksen", "CM", 14),
                ("Sancho", "RW", 25),
                ("Rashford", "LW", 10),
                ("Martial", "ST", 9),
            ]),
        },
        "away": {
            "formation": "4-3-3",
            "players": _squad([
                ("Alisson", "GK", 1),
                ("Alexander-Arnold", "RB", 66),
                ("Van Dijk", "CB", 4),
                ("Konaté", "CB", 5),
                ("Robertson", "LB", 26),
                ("Fabinho", "CDM", 3),
                ("Henderson", "CM", 14),
                ("Thiago", "CM", 6),
                ("Salah", "RW", 11),
                ("Diaz", "LW", 23),
                ("Núñez", "ST", 27),
            ]),
        },
    },
}

_PLACEHOLDER_POSITIONS = ("GK", "DF", "DF", "DF", "DF", "MF", "MF", "MF", "FW", "FW", "FW")

# Served for known matches without a dedicated lineup record
PLACEHOLDER_LINEUP = {
    "home": {
        "players": [
            {"player": {"name": f"Player {i + 1}", "position": pos}}
            for i, pos in enumerate(_PLACEHOLDER_POSITIONS)
        ],
    },
    "away": {
        "players": [
            {"player": {"name": f"Player {i + 12}", "position": pos}}
            for i, pos in enumerate(_PLACEHOLDER_POSITIONS)
        ],
    },
}

SAMPLE_INCIDENTS = {
    "incidents": [
        {"time": 10, "isHome": True, "player": {"name": "Player 9"},
         "incidentType": "goal", "incidentClass": "regular"},
        {"time": 23, "isHome": False, "player": {"name": "Player 20"},
         "incidentType": "card", "incidentClass": "yellow"},
        {"time": 45, "isHome": False, "player": {"name": "Player 21"},
         "incidentType": "goal", "incidentClass": "regular"},
        {"time": 67, "isHome": True, "player": {"name": "Player 7"},
         "incidentType": "card", "incidentClass": "red"},
        {"time": 78, "isHome": True, "player": {"name": "Player 10"},
         "incidentType": "penalty", "incidentClass": "scored"},
    ],
}

DEFAULT_HEAD_TO_HEAD = HeadToHead(
    number_of_matches=10,
    total_goals=25,
    home_wins=4,
    draws=2,
    away_wins=4,
)


@dataclass(frozen=True)
class MockCatalog:
    """
    Immutable sample dataset keyed by match id.

    Built once at startup and passed into the proxy components.
    """
    matches: Tuple[Match, ...]
    statistics: Mapping[int, MatchStatistics]
    lineups: Mapping[int, Lineups]
    default_statistics: MatchStatistics
    placeholder_lineups: Lineups
    sample_events: Tuple[MatchEvent, ...]
    head_to_head: HeadToHead

    def get_match(self, match_id: int) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def get_statistics(self, match_id: int) -> Optional[MatchStatistics]:
        return self.statistics.get(match_id)

    def get_lineups(self, match_id: int) -> Lineups:
        """Dedicated lineup for the match, or the placeholder XI."""
        return self.lineups.get(match_id, self.placeholder_lineups)


def build_mock_catalog() -> MockCatalog:
    """Normalize the raw records into a fresh immutable catalog."""
    catalog = MockCatalog(
        matches=tuple(normalizer.normalize_sofascore_event(raw) for raw in RAW_MATCHES),
        statistics=MappingProxyType({
            match_id: MatchStatistics.build(values)
            for match_id, values in RAW_STATISTICS.items()
        }),
        lineups=MappingProxyType({
            match_id: normalizer.normalize_sofascore_lineups(raw)
            for match_id, raw in RAW_LINEUPS.items()
        }),
        default_statistics=MatchStatistics.build(DEFAULT_STATISTICS),
        placeholder_lineups=normalizer.normalize_sofascore_lineups(PLACEHOLDER_LINEUP),
        sample_events=normalizer.normalize_sofascore_incidents(SAMPLE_INCIDENTS),
        head_to_head=DEFAULT_HEAD_TO_HEAD,
    )
    logger.info(
        f"Mock catalog loaded: {len(catalog.matches)} matches, "
        f"{len(catalog.statistics)} statistics, {len(catalog.lineups)} lineups"
    )
    return catalog


@lru_cache(maxsize=1)
def load_mock_catalog() -> MockCatalog:
    """Shared catalog instance used by the default app."""
    return build_mock_catalog()
