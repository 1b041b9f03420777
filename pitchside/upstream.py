"""
Upstream HTTP clients for SofaScore and Football-Data.org.

Each client maps an EndpointRequest to an ordered list of named routes (the
primary URL, plus a fallback URL where the provider needs one) and performs
single GET requests with the provider's headers. Failures raise
UpstreamUnavailableError; recovery is the orchestrator's job.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from config.settings import Settings
from pitchside.endpoints import EndpointKind, EndpointRequest, Provider
from pitchside.errors import UnknownEndpointError, UpstreamUnavailableError

logger = logging.getLogger("pitchside.upstream")

SOFASCORE_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://www.sofascore.com/",
    "Origin": "https://www.sofascore.com",
    "Cache-Control": "no-cache",
}


@dataclass(frozen=True)
class UpstreamRoute:
    """A named provider URL."""
    name: str
    url: str


class UpstreamClient:
    """Shared GET logic; subclasses provide routes and headers."""

    provider: Provider

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        # None means a standalone requests.get per call, with no cookies carried over
        self.session = session

    @property
    def is_configured(self) -> bool:
        """Whether live calls are possible (credential present / provider enabled)."""
        raise NotImplementedError

    def routes(self, request: EndpointRequest) -> List[UpstreamRoute]:
        raise NotImplementedError

    def headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def fetch(self, route: UpstreamRoute) -> Dict[str, Any]:
        """
        Perform one GET and return the decoded JSON object.

        Raises:
            UpstreamUnavailableError: network error, non-2xx status,
                or a body that is not a JSON object
        """
        logger.info(f"Fetching {self.provider.value} [{route.name}]: {route.url}")
        try:
            get = self.session.get if self.session is not None else requests.get
            response = get(
                route.url,
                headers=self.headers(),
                timeout=self.settings.upstream_timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning(f"{self.provider.value} [{route.name}] responded with status {status}")
            raise UpstreamUnavailableError(details=str(e), url=route.url, upstream_status=status) from e
        except requests.RequestException as e:
            logger.warning(f"{self.provider.value} [{route.name}] request failed: {e}")
            raise UpstreamUnavailableError(details=str(e), url=route.url) from e
        except ValueError as e:
            logger.warning(f"{self.provider.value} [{route.name}] returned invalid JSON: {e}")
            raise UpstreamUnavailableError(details="invalid JSON body", url=route.url) from e

        if not isinstance(data, dict):
            logger.warning(f"{self.provider.value} [{route.name}] returned a non-object body")
            raise UpstreamUnavailableError(details="unexpected body shape", url=route.url)
        return data


class SofaScoreClient(UpstreamClient):
    """Public SofaScore API, which expects browser-like headers."""

    provider = Provider.SOFASCORE

    @property
    def is_configured(self) -> bool:
        return self.settings.sofascore_enabled

    def headers(self) -> Dict[str, str]:
        return dict(SOFASCORE_HEADERS)

    def routes(self, request: EndpointRequest) -> List[UpstreamRoute]:
        base = self.settings.sofascore_base_url.rstrip("/")
        match_id = request.match_id

        if request.kind is EndpointKind.LIVE_MATCHES:
            return [UpstreamRoute("primary", f"{base}/sport/football/events/live")]
        if request.kind is EndpointKind.MATCH_DETAIL:
            return [UpstreamRoute("primary", f"{base}/event/{match_id}")]
        if request.kind is EndpointKind.MATCH_STATISTICS:
            # Statistics alone has a legacy path to try when the event path fails
            return [
                UpstreamRoute("primary", f"{base}/event/{match_id}/statistics"),
                UpstreamRoute("statistics-fallback", f"{base}/match/{match_id}/statistics"),
            ]
        if request.kind is EndpointKind.MATCH_LINEUPS:
            return [UpstreamRoute("primary", f"{base}/event/{match_id}/lineups")]
        if request.kind is EndpointKind.MATCH_EVENTS:
            return [UpstreamRoute("primary", f"{base}/event/{match_id}/incidents")]
        raise UnknownEndpointError()


class FootballDataClient(UpstreamClient):
    """Football-Data.org v4, authenticated with an X-Auth-Token header."""

    provider = Provider.FOOTBALL_DATA

    @property
    def is_configured(self) -> bool:
        return self.settings.has_football_data_key

    def headers(self) -> Dict[str, str]:
        return {"X-Auth-Token": self.settings.football_data_api_key or ""}

    def routes(self, request: EndpointRequest) -> List[UpstreamRoute]:
        base = self.settings.football_data_base_url.rstrip("/")

        if request.kind is EndpointKind.LIVE_MATCHES:
            # No dedicated live endpoint; filter by in-play statuses
            return [UpstreamRoute("primary", f"{base}/matches?status=LIVE,IN_PLAY,PAUSED")]
        if request.kind is EndpointKind.MATCH_DETAIL:
            return [UpstreamRoute("primary", f"{base}/matches/{request.match_id}")]
        raise UnknownEndpointError()
