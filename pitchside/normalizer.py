"""
Response normalizer.

Reshapes provider-specific JSON (SofaScore, Football-Data.org v4) and mock
records into the stable shapes in pitchside.models. Missing fields are
coalesced to conservative defaults instead of failing the response.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pitchside.models import (
    INCIDENT_TYPES,
    LineupPlayer,
    Lineups,
    Match,
    MatchEvent,
    MatchStatistics,
    MatchStatus,
    Score,
    TeamLineup,
    TeamRef,
    Tournament,
)
from pitchside.utils.helpers import (
    first_present,
    safe_dict,
    safe_int,
    safe_str,
    short_code,
    utc_now_iso,
)

logger = logging.getLogger("pitchside.normalizer")

# SofaScore statisticsItems key -> MatchStatistics field
SOFASCORE_STAT_KEYS = {
    "ballPossession": "possession",
    "totalShotsOnGoal": "total_shots",
    "totalShots": "total_shots",
    "shotsOnGoal": "shots_on_target",
    "shotsOnTarget": "shots_on_target",
    "cornerKicks": "corners",
    "corners": "corners",
    "fouls": "fouls",
    "yellowCards": "yellow_cards",
    "redCards": "red_cards",
}

# Older payloads only carry display names
SOFASCORE_STAT_NAMES = {
    "ball possession": "possession",
    "total shots": "total_shots",
    "shots on target": "shots_on_target",
    "corner kicks": "corners",
    "fouls": "fouls",
    "yellow cards": "yellow_cards",
    "red cards": "red_cards",
}

# camelCase keys of our own periods block
PERIOD_KEYS = {
    "possession": "possession",
    "totalShots": "total_shots",
    "shotsOnTarget": "shots_on_target",
    "corners": "corners",
    "fouls": "fouls",
    "yellowCards": "yellow_cards",
    "redCards": "red_cards",
}


# =============================================================================
# SOFASCORE
# =============================================================================

def _team(raw: Any) -> TeamRef:
    data = safe_dict(raw)
    name = safe_str(data.get("name"))
    return TeamRef(
        id=safe_int(data.get("id")),
        name=name,
        short_name=safe_str(first_present(data.get("shortName"), data.get("nameCode"))) or short_code(name),
    )


def _score(raw: Any) -> Score:
    data = safe_dict(raw)
    return Score(
        current=safe_int(first_present(data.get("current"), data.get("display"))),
        period1=safe_int(data.get("period1")),
        period2=safe_int(data.get("period2")),
    )


def _status(raw: Any) -> MatchStatus:
    data = safe_dict(raw)
    code = safe_int(data.get("code"))
    description = safe_str(data.get("description"))
    if not description and code == 1:
        description = "Live"
    return MatchStatus.from_code(code, description, data.get("type") or None)


def _tournament(raw: Any) -> Tournament:
    data = safe_dict(raw)
    unique = safe_dict(data.get("uniqueTournament"))
    category = safe_dict(first_present(unique.get("category"), data.get("category")))
    name = safe_str(first_present(data.get("name"), unique.get("name")))
    return Tournament(
        id=safe_int(data.get("id")),
        name=name,
        unique_id=safe_int(first_present(unique.get("id"), data.get("id"))),
        unique_name=safe_str(first_present(unique.get("name"), name)),
        category_id=safe_int(category.get("id")),
        category_name=safe_str(category.get("name")),
    )


def normalize_sofascore_event(raw: Dict[str, Any]) -> Match:
    """Normalize a single SofaScore event (or mock match record)."""
    return Match(
        id=safe_int(raw.get("id")),
        home_team=_team(raw.get("homeTeam")),
        away_team=_team(raw.get("awayTeam")),
        home_score=_score(raw.get("homeScore")),
        away_score=_score(raw.get("awayScore")),
        status=_status(raw.get("status")),
        tournament=_tournament(raw.get("tournament")),
    )


def _is_complete_event(raw: Any) -> bool:
    if not isinstance(raw, dict):
        return False
    return all(raw.get(k) for k in ("homeTeam", "awayTeam", "homeScore", "awayScore", "status"))


def normalize_sofascore_events(payload: Dict[str, Any]) -> Tuple[Match, ...]:
    """
    Normalize a live-events document.

    Events missing teams, scores or status are dropped.
    """
    raw_events = payload.get("events")
    if not isinstance(raw_events, list):
        return ()
    matches = tuple(normalize_sofascore_event(e) for e in raw_events if _is_complete_event(e))
    dropped = len(raw_events) - len(matches)
    if dropped:
        logger.debug(f"Dropped {dropped} incomplete events")
    return matches


def normalize_sofascore_event_detail(payload: Dict[str, Any]) -> Match:
    """Event detail documents wrap the match in an `event` key."""
    return normalize_sofascore_event(safe_dict(first_present(payload.get("event"), payload)))


def _pick_period(periods: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    for period in periods:
        if period.get("period") == "ALL":
            return period
    return periods[0] if periods else None


def _stat_item_values(item: Dict[str, Any]) -> Tuple[int, int]:
    home = first_present(item.get("homeValue"), item.get("home"))
    away = first_present(item.get("awayValue"), item.get("away"))
    return safe_int(home), safe_int(away)


def _statistics_from_groups(period: Dict[str, Any]) -> MatchStatistics:
    values: Dict[str, Tuple[int, int]] = {}
    for group in period.get("groups") or []:
        for item in safe_dict(group).get("statisticsItems") or []:
            item = safe_dict(item)
            field_name = SOFASCORE_STAT_KEYS.get(item.get("key")) or SOFASCORE_STAT_NAMES.get(
                safe_str(item.get("name")).strip().lower()
            )
            # First occurrence wins; SofaScore repeats some items across groups
            if field_name and field_name not in values:
                values[field_name] = _stat_item_values(item)
    return MatchStatistics.build(values, period=safe_str(period.get("period"), "ALL") or "ALL")


def _statistics_from_periods(periods: Dict[str, Any]) -> MatchStatistics:
    period_name = "ALL" if "ALL" in periods else next(iter(periods), "ALL")
    block = safe_dict(periods.get(period_name))
    values = {}
    for key, field_name in PERIOD_KEYS.items():
        pair = block.get(key)
        if isinstance(pair, dict):
            values[field_name] = (safe_int(pair.get("home")), safe_int(pair.get("away")))
    return MatchStatistics.build(values, period=period_name)


def normalize_sofascore_statistics(payload: Dict[str, Any]) -> MatchStatistics:
    """
    Normalize a statistics document.

    Accepts the grouped `statistics: [{period, groups: [...]}]` layout and the
    flat `statistics: {periods: {ALL: {...}}}` layout. Anything else yields
    the default block (0 counters, 50/50 possession).
    """
    raw = payload.get("statistics")
    if isinstance(raw, list):
        period = _pick_period([p for p in raw if isinstance(p, dict)])
        if period is not None:
            return _statistics_from_groups(period)
    elif isinstance(raw, dict) and isinstance(raw.get("periods"), dict):
        return _statistics_from_periods(raw["periods"])
    logger.debug("Statistics payload had no usable period, using defaults")
    return MatchStatistics()


def _lineup_player(raw: Any) -> Optional[LineupPlayer]:
    entry = safe_dict(raw)
    player = safe_dict(entry.get("player"))
    name = safe_str(first_present(player.get("name"), player.get("shortName"), entry.get("name")))
    if not name:
        return None
    number = first_present(entry.get("shirtNumber"), entry.get("jerseyNumber"), entry.get("number"))
    return LineupPlayer(
        name=name,
        position=safe_str(first_present(player.get("position"), entry.get("position"))),
        shirt_number=safe_int(number) if number is not None else None,
        substitute=bool(entry.get("substitute", False)),
    )


def _team_lineup(raw: Any) -> TeamLineup:
    data = safe_dict(raw)
    players = (_lineup_player(p) for p in data.get("players") or [])
    return TeamLineup(
        players=tuple(p for p in players if p is not None),
        formation=data.get("formation") or None,
    )


def normalize_sofascore_lineups(payload: Dict[str, Any]) -> Lineups:
    return Lineups(home=_team_lineup(payload.get("home")), away=_team_lineup(payload.get("away")))


def normalize_sofascore_incidents(payload: Dict[str, Any]) -> Tuple[MatchEvent, ...]:
    """
    Normalize an incidents document.

    Only goal, card and penalty incidents are kept, ordered by minute.
    """
    events = []
    for raw in payload.get("incidents") or []:
        raw = safe_dict(raw)
        incident_type = safe_str(raw.get("incidentType")).lower()
        if incident_type not in INCIDENT_TYPES:
            continue
        player = safe_dict(raw.get("player"))
        events.append(MatchEvent(
            minute=safe_int(raw.get("time")),
            is_home=bool(raw.get("isHome", False)),
            player_name=safe_str(first_present(player.get("name"), raw.get("playerName")), "Unknown"),
            incident_type=incident_type,
            incident_class=safe_str(raw.get("incidentClass")),
        ))
    # sorted() is stable, so same-minute incidents keep provider order
    return tuple(sorted(events, key=lambda e: e.minute))


# =============================================================================
# FOOTBALL-DATA.ORG
# =============================================================================

def _fd_pair(raw: Any) -> Dict[str, int]:
    data = safe_dict(raw)
    return {"home": safe_int(data.get("home")), "away": safe_int(data.get("away"))}


def _fd_team(raw: Any, placeholder_image: str) -> Dict[str, Any]:
    data = safe_dict(raw)
    name = safe_str(data.get("name"))
    short_name = safe_str(first_present(data.get("shortName"), name))
    return {
        "id": safe_int(data.get("id")),
        "name": name,
        "shortName": short_name,
        "tla": safe_str(first_present(data.get("tla"), short_code(name))),
        "crest": safe_str(first_present(data.get("crest"), placeholder_image)),
    }


def normalize_football_data_match(raw: Dict[str, Any], placeholder_image: str) -> Dict[str, Any]:
    """Coalesce a live Football-Data.org match into the stable document shape."""
    score = safe_dict(raw.get("score"))
    competition = safe_dict(raw.get("competition"))
    competition_name = safe_str(competition.get("name"))
    now = utc_now_iso()
    minute = raw.get("minute")
    return {
        "id": safe_int(raw.get("id")),
        "utcDate": safe_str(first_present(raw.get("utcDate"), now)),
        "status": safe_str(raw.get("status"), "SCHEDULED") or "SCHEDULED",
        "matchday": raw.get("matchday"),
        "stage": safe_str(raw.get("stage"), "REGULAR_SEASON") or "REGULAR_SEASON",
        "group": raw.get("group"),
        "lastUpdated": safe_str(first_present(raw.get("lastUpdated"), now)),
        "score": {
            "winner": score.get("winner"),
            "duration": safe_str(score.get("duration"), "REGULAR") or "REGULAR",
            "fullTime": _fd_pair(score.get("fullTime")),
            "halfTime": _fd_pair(score.get("halfTime")),
        },
        "homeTeam": _fd_team(raw.get("homeTeam"), placeholder_image),
        "awayTeam": _fd_team(raw.get("awayTeam"), placeholder_image),
        "competition": {
            "id": safe_int(competition.get("id")),
            "name": competition_name,
            "code": safe_str(first_present(competition.get("code"), competition_name[:3].upper())),
            "type": safe_str(competition.get("type"), "LEAGUE") or "LEAGUE",
            "emblem": safe_str(first_present(competition.get("emblem"), placeholder_image)),
        },
        "minute": safe_str(minute) if minute is not None else None,
    }


def normalize_football_data_matches(payload: Dict[str, Any], placeholder_image: str) -> List[Dict[str, Any]]:
    raw_matches = payload.get("matches")
    if not isinstance(raw_matches, list):
        return []
    return [normalize_football_data_match(m, placeholder_image) for m in raw_matches if isinstance(m, dict)]


def football_data_from_mock(match: Match, placeholder_image: str, now: Optional[str] = None) -> Dict[str, Any]:
    """
    Render a mock match as a Football-Data.org document.

    Fields the provider supplies but mock data lacks are synthesized:
    timestamps are now, team ids derive from the match id, images use the
    placeholder path.
    """
    now = now or utc_now_iso()
    home_goals = match.home_score.current
    away_goals = match.away_score.current
    return {
        "id": match.id,
        "utcDate": now,
        "status": "PAUSED" if match.status.is_half_time else "IN_PLAY",
        "matchday": 1,
        "stage": "REGULAR_SEASON",
        "group": None,
        "lastUpdated": now,
        "score": {
            "winner": None,
            "duration": "REGULAR",
            "fullTime": {"home": home_goals, "away": away_goals},
            "halfTime": {"home": home_goals // 2, "away": away_goals // 2},
        },
        "homeTeam": {
            "id": match.id * 10,
            "name": match.home_team.name,
            "shortName": match.home_team.display_name,
            "tla": match.home_team.display_name,
            "crest": placeholder_image,
        },
        "awayTeam": {
            "id": match.id * 10 + 1,
            "name": match.away_team.name,
            "shortName": match.away_team.display_name,
            "tla": match.away_team.display_name,
            "crest": placeholder_image,
        },
        "competition": {
            "id": 1,
            "name": match.tournament.unique_name,
            "code": match.tournament.competition_code,
            "type": "LEAGUE",
            "emblem": placeholder_image,
        },
        "minute": match.status.minute,
    }


def football_data_result_set(matches: Iterable[Dict[str, Any]], now: Optional[str] = None) -> Dict[str, Any]:
    """The `resultSet` summary block of a match list."""
    now = now or utc_now_iso()
    count = len(list(matches))
    return {"count": count, "first": now, "last": now, "played": count}
