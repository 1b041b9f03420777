"""
Logical endpoint vocabulary.

The `endpoint` query string ("live-matches", "match-statistics/10001",
"matches/live"...) is decoded once into an `EndpointRequest` at the HTTP
boundary; everything downstream switches on `EndpointKind`.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from pitchside.errors import InvalidMatchIdError, UnknownEndpointError


class Provider(Enum):
    """Upstream data providers."""
    SOFASCORE = "sofascore"
    FOOTBALL_DATA = "football-data"


class EndpointKind(Enum):
    """Provider-agnostic operations."""
    LIVE_MATCHES = "live_matches"
    MATCH_DETAIL = "match_detail"
    MATCH_STATISTICS = "match_statistics"
    MATCH_LINEUPS = "match_lineups"
    MATCH_EVENTS = "match_events"

    @property
    def needs_match_id(self) -> bool:
        return self is not EndpointKind.LIVE_MATCHES


@dataclass(frozen=True)
class EndpointRequest:
    """A decoded logical endpoint with its typed parameters."""
    provider: Provider
    kind: EndpointKind
    match_id: Optional[int] = None

    @property
    def label(self) -> str:
        """Short description for log lines."""
        if self.match_id is None:
            return f"{self.provider.value}:{self.kind.value}"
        return f"{self.provider.value}:{self.kind.value}/{self.match_id}"


# Exact endpoint strings without parameters
_STATIC_ENDPOINTS: Dict[Provider, Dict[str, EndpointKind]] = {
    Provider.SOFASCORE: {"live-matches": EndpointKind.LIVE_MATCHES},
    Provider.FOOTBALL_DATA: {"matches/live": EndpointKind.LIVE_MATCHES},
}

# "<prefix>/<match id>" endpoint strings
_ID_ENDPOINTS: Dict[Provider, Dict[str, EndpointKind]] = {
    Provider.SOFASCORE: {
        "match": EndpointKind.MATCH_DETAIL,
        "match-statistics": EndpointKind.MATCH_STATISTICS,
        "match-lineups": EndpointKind.MATCH_LINEUPS,
        "match-events": EndpointKind.MATCH_EVENTS,
    },
    Provider.FOOTBALL_DATA: {
        "matches": EndpointKind.MATCH_DETAIL,
    },
}


def parse_match_id(value: str) -> int:
    """Parse a match id segment, raising InvalidMatchIdError when non-numeric."""
    value = (value or "").strip()
    if not (value.isascii() and value.isdigit()):
        raise InvalidMatchIdError()
    return int(value)


def _split(endpoint: str) -> Tuple[str, Optional[str]]:
    prefix, sep, rest = endpoint.partition("/")
    return prefix, (rest if sep else None)


def parse_endpoint(provider: Provider, endpoint: Optional[str]) -> EndpointRequest:
    """
    Decode an endpoint string for a provider.

    Raises:
        UnknownEndpointError: the string names no known operation
        InvalidMatchIdError: the operation is known but the id is not numeric
    """
    endpoint = (endpoint or "").strip()

    static_kind = _STATIC_ENDPOINTS[provider].get(endpoint)
    if static_kind is not None:
        return EndpointRequest(provider=provider, kind=static_kind)

    prefix, rest = _split(endpoint)
    kind = _ID_ENDPOINTS[provider].get(prefix)
    if kind is None or rest is None:
        raise UnknownEndpointError()

    # Only the first segment after the prefix is the id ("match/10001/extra")
    match_id = parse_match_id(rest.split("/")[0])
    return EndpointRequest(provider=provider, kind=kind, match_id=match_id)
