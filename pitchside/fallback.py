"""
Fallback orchestrator.

Per request it builds an ordered list of named recovery strategies
(primary URL, optional statistics fallback URL, mock catalog), runs them in
sequence and returns the first success tagged with its provenance. Upstream
failures move on to the next strategy; client errors from the mock lookup
(unknown match id) are terminal.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from config.settings import Settings
from pitchside import normalizer
from pitchside.endpoints import EndpointKind, EndpointRequest, Provider, parse_endpoint
from pitchside.errors import NotFoundError, UnknownEndpointError, UpstreamUnavailableError
from pitchside.mock_data import MockCatalog
from pitchside.models import Match
from pitchside.upstream import UpstreamClient, UpstreamRoute
from pitchside.utils.helpers import utc_now_iso

logger = logging.getLogger("pitchside.fallback")

MOCK_STRATEGY = "mock"


@dataclass(frozen=True)
class Rendered:
    """Payload produced by one strategy."""
    payload: Dict[str, Any]
    is_default: bool = False


@dataclass(frozen=True)
class Attempt:
    """Outcome of one strategy in the chain."""
    strategy: str
    ok: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class RecoveryStrategy:
    """A named way of producing the response."""
    name: str
    run: Callable[[], Rendered]
    uses_mock: bool = False


@dataclass(frozen=True)
class ProxyResult:
    """Uniform response with provenance."""
    payload: Dict[str, Any]
    using_mock: bool
    strategy: str
    is_default: bool = False
    attempts: Tuple[Attempt, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        body = dict(self.payload)
        body["usingMockData"] = self.using_mock
        if self.is_default:
            body["isDefaultData"] = True
        return body


def run_strategies(strategies: List[RecoveryStrategy]) -> ProxyResult:
    """
    Try each strategy in order and return the first success.

    Only UpstreamUnavailableError advances the chain; any other exception
    propagates to the caller unchanged.
    """
    attempts: List[Attempt] = []
    last_error: Optional[UpstreamUnavailableError] = None

    for strategy in strategies:
        try:
            rendered = strategy.run()
        except UpstreamUnavailableError as e:
            attempts.append(Attempt(strategy=strategy.name, ok=False, error=e.details or e.message))
            last_error = e
            logger.warning(f"Strategy '{strategy.name}' failed: {e.details or e.message}")
            continue

        attempts.append(Attempt(strategy=strategy.name, ok=True))
        return ProxyResult(
            payload=rendered.payload,
            using_mock=strategy.uses_mock,
            strategy=strategy.name,
            is_default=rendered.is_default,
            attempts=tuple(attempts),
        )

    raise last_error or UpstreamUnavailableError(details="no strategies to run")


class FallbackOrchestrator:
    """
    Serves logical endpoint requests from live providers with mock fallback.

    Args:
        settings: Application settings
        catalog: Immutable mock catalog shared across requests
        clients: Upstream client per provider
        sleep: Delay function used to emulate latency on mock paths
    """

    def __init__(
        self,
        settings: Settings,
        catalog: MockCatalog,
        clients: Mapping[Provider, UpstreamClient],
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.catalog = catalog
        self.clients = dict(clients)
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def handle(self, request: EndpointRequest, use_mock: bool = False) -> ProxyResult:
        """Serve a decoded request, live first unless mock is forced or unavailable."""
        strategies = self.strategies(request, use_mock=use_mock)
        result = run_strategies(strategies)
        if result.using_mock:
            logger.info(f"Served {request.label} from mock data")
        return result

    def strategies(self, request: EndpointRequest, use_mock: bool = False) -> List[RecoveryStrategy]:
        """Ordered recovery chain for a request."""
        mock = RecoveryStrategy(MOCK_STRATEGY, lambda: self._render_mock(request), uses_mock=True)

        if use_mock:
            logger.info(f"Mock data explicitly requested for {request.label}")
            return [mock]

        client = self.clients.get(request.provider)
        if client is None or not client.is_configured:
            logger.info(f"No credential configured for {request.provider.value}, using mock data")
            return [mock]

        live = [
            RecoveryStrategy(route.name, self._live_runner(client, route, request))
            for route in client.routes(request)
        ]
        return live + [mock]

    def catalog_view(self, endpoint: Optional[str]) -> ProxyResult:
        """
        Browse the mock catalog directly (no upstream involved).

        Supports `live-matches` and `match/{id}`; the detail view bundles the
        match with its statistics and lineups when the catalog has them.
        """
        request = parse_endpoint(Provider.SOFASCORE, endpoint)
        if request.kind not in (EndpointKind.LIVE_MATCHES, EndpointKind.MATCH_DETAIL):
            raise UnknownEndpointError()

        def render() -> Rendered:
            self._emulate_latency()
            if request.kind is EndpointKind.LIVE_MATCHES:
                return Rendered({"events": [m.to_dict() for m in self.catalog.matches]})
            match = self._require_match(request.match_id)
            statistics = self.catalog.get_statistics(match.id)
            lineups = self.catalog.lineups.get(match.id)
            return Rendered({
                "match": match.to_dict(),
                "statistics": statistics.to_dict() if statistics else None,
                "lineups": lineups.to_dict() if lineups else None,
            })

        return run_strategies([RecoveryStrategy(MOCK_STRATEGY, render, uses_mock=True)])

    # ------------------------------------------------------------------
    # Live rendering
    # ------------------------------------------------------------------

    def _live_runner(
        self, client: UpstreamClient, route: UpstreamRoute, request: EndpointRequest
    ) -> Callable[[], Rendered]:
        def run() -> Rendered:
            data = client.fetch(route)
            return self._render_live(request, data)
        return run

    def _render_live(self, request: EndpointRequest, data: Dict[str, Any]) -> Rendered:
        if request.provider is Provider.FOOTBALL_DATA:
            return self._render_live_football_data(request, data)

        kind = request.kind
        if kind is EndpointKind.LIVE_MATCHES:
            matches = normalizer.normalize_sofascore_events(data)
            return Rendered({"events": [m.to_dict() for m in matches]})
        if kind is EndpointKind.MATCH_DETAIL:
            return Rendered({"event": normalizer.normalize_sofascore_event_detail(data).to_dict()})
        if kind is EndpointKind.MATCH_STATISTICS:
            return Rendered({"statistics": normalizer.normalize_sofascore_statistics(data).to_dict()})
        if kind is EndpointKind.MATCH_LINEUPS:
            return Rendered(normalizer.normalize_sofascore_lineups(data).to_dict())
        if kind is EndpointKind.MATCH_EVENTS:
            incidents = normalizer.normalize_sofascore_incidents(data)
            return Rendered({"incidents": [e.to_dict() for e in incidents]})
        raise UnknownEndpointError()

    def _render_live_football_data(self, request: EndpointRequest, data: Dict[str, Any]) -> Rendered:
        placeholder = self.settings.placeholder_image
        if request.kind is EndpointKind.LIVE_MATCHES:
            matches = normalizer.normalize_football_data_matches(data, placeholder)
            return Rendered({
                "matches": matches,
                "resultSet": normalizer.football_data_result_set(matches),
            })
        if request.kind is EndpointKind.MATCH_DETAIL:
            return Rendered(normalizer.normalize_football_data_match(data, placeholder))
        raise UnknownEndpointError()

    # ------------------------------------------------------------------
    # Mock rendering
    # ------------------------------------------------------------------

    def _emulate_latency(self) -> None:
        if self.settings.mock_delay_ms > 0:
            self._sleep(self.settings.mock_delay_ms / 1000)

    def _require_match(self, match_id: Optional[int]) -> Match:
        match = self.catalog.get_match(match_id) if match_id is not None else None
        if match is None:
            raise NotFoundError()
        return match

    def _render_mock(self, request: EndpointRequest) -> Rendered:
        self._emulate_latency()
        if request.provider is Provider.FOOTBALL_DATA:
            return self._render_mock_football_data(request)

        kind = request.kind
        if kind is EndpointKind.LIVE_MATCHES:
            return Rendered({"events": [m.to_dict() for m in self.catalog.matches]})
        if kind is EndpointKind.MATCH_DETAIL:
            return Rendered({"event": self._require_match(request.match_id).to_dict()})
        if kind is EndpointKind.MATCH_STATISTICS:
            statistics = self.catalog.get_statistics(request.match_id)
            if statistics is None:
                logger.info(f"No mock statistics for match {request.match_id}, using default statistics")
                return Rendered({"statistics": self.catalog.default_statistics.to_dict()}, is_default=True)
            return Rendered({"statistics": statistics.to_dict()})
        if kind is EndpointKind.MATCH_LINEUPS:
            match = self._require_match(request.match_id)
            return Rendered(self.catalog.get_lineups(match.id).to_dict())
        if kind is EndpointKind.MATCH_EVENTS:
            self._require_match(request.match_id)
            return Rendered({"incidents": [e.to_dict() for e in self.catalog.sample_events]})
        raise UnknownEndpointError()

    def _render_mock_football_data(self, request: EndpointRequest) -> Rendered:
        placeholder = self.settings.placeholder_image
        now = utc_now_iso()
        if request.kind is EndpointKind.LIVE_MATCHES:
            matches = [
                normalizer.football_data_from_mock(m, placeholder, now)
                for m in self.catalog.matches
            ]
            return Rendered({
                "matches": matches,
                "resultSet": normalizer.football_data_result_set(matches, now),
            })
        if request.kind is EndpointKind.MATCH_DETAIL:
            match = self._require_match(request.match_id)
            document = normalizer.football_data_from_mock(match, placeholder, now)
            document["head2head"] = self.catalog.head_to_head.to_dict()
            return Rendered(document)
        raise UnknownEndpointError()
