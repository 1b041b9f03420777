"""
Unit tests for the fallback orchestrator and strategy chaining.
"""
import pytest

from conftest import SOFASCORE_BASE, FOOTBALL_DATA_BASE, FakeSession, MockResponse, make_settings
from pitchside.endpoints import Provider, parse_endpoint
from pitchside.errors import NotFoundError, UnknownEndpointError, UpstreamUnavailableError
from pitchside.fallback import (
    FallbackOrchestrator,
    Rendered,
    RecoveryStrategy,
    run_strategies,
)
from pitchside.upstream import FootballDataClient, SofaScoreClient


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def build(catalog, sleeps):
    """Build an orchestrator around a FakeSession."""

    def _build(routes=None, **overrides):
        settings = make_settings(**overrides)
        session = FakeSession(routes)
        orchestrator = FallbackOrchestrator(
            settings=settings,
            catalog=catalog,
            clients={
                Provider.SOFASCORE: SofaScoreClient(settings, session),
                Provider.FOOTBALL_DATA: FootballDataClient(settings, session),
            },
            sleep=sleeps.append,
        )
        return orchestrator, session

    return _build


def _sofa(endpoint):
    return parse_endpoint(Provider.SOFASCORE, endpoint)


def _fd(endpoint):
    return parse_endpoint(Provider.FOOTBALL_DATA, endpoint)


# =============================================================================
# Strategy chain
# =============================================================================

class TestRunStrategies:

    @staticmethod
    def _failing(name):
        def run():
            raise UpstreamUnavailableError(details=f"{name} down")
        return RecoveryStrategy(name, run)

    def test_first_success_wins(self):
        calls = []

        def ok():
            calls.append("b")
            return Rendered({"x": 1})

        result = run_strategies([
            self._failing("a"),
            RecoveryStrategy("b", ok),
            RecoveryStrategy("c", lambda: calls.append("c")),
        ])
        assert result.strategy == "b"
        assert result.payload == {"x": 1}
        assert calls == ["b"]
        assert [(a.strategy, a.ok) for a in result.attempts] == [("a", False), ("b", True)]
        assert result.attempts[0].error == "a down"

    def test_mock_strategy_sets_provenance(self):
        result = run_strategies([
            self._failing("primary"),
            RecoveryStrategy("mock", lambda: Rendered({"y": 2}, is_default=True), uses_mock=True),
        ])
        assert result.using_mock is True
        assert result.to_dict() == {"y": 2, "usingMockData": True, "isDefaultData": True}

    def test_live_success_flag_false(self):
        result = run_strategies([RecoveryStrategy("primary", lambda: Rendered({"z": 3}))])
        assert result.to_dict() == {"z": 3, "usingMockData": False}

    def test_all_failing_raises_last_error(self):
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            run_strategies([self._failing("a"), self._failing("b")])
        assert exc_info.value.details == "b down"

    def test_client_errors_are_terminal(self):
        def not_found():
            raise NotFoundError()

        with pytest.raises(NotFoundError):
            run_strategies([
                RecoveryStrategy("mock", not_found, uses_mock=True),
                RecoveryStrategy("never", lambda: Rendered({})),
            ])


# =============================================================================
# Orchestrator: chain construction
# =============================================================================

class TestStrategySelection:

    def test_use_mock_skips_network(self, build):
        orchestrator, session = build()
        strategies = orchestrator.strategies(_sofa("match/10001"), use_mock=True)
        assert [s.name for s in strategies] == ["mock"]
        orchestrator.handle(_sofa("match/10001"), use_mock=True)
        assert session.calls == []

    def test_missing_key_skips_network(self, build):
        orchestrator, session = build(football_data_api_key=None)
        result = orchestrator.handle(_fd("matches/live"))
        assert result.using_mock is True
        assert session.calls == []

    def test_disabled_sofascore_skips_network(self, build):
        orchestrator, session = build(sofascore_enabled=False)
        result = orchestrator.handle(_sofa("live-matches"))
        assert result.using_mock is True
        assert session.calls == []

    def test_statistics_chain(self, build):
        orchestrator, _ = build()
        names = [s.name for s in orchestrator.strategies(_sofa("match-statistics/1"))]
        assert names == ["primary", "statistics-fallback", "mock"]

    def test_other_chains_have_no_fallback_url(self, build):
        orchestrator, _ = build()
        for endpoint in ("live-matches", "match/1", "match-lineups/1", "match-events/1"):
            names = [s.name for s in orchestrator.strategies(_sofa(endpoint))]
            assert names == ["primary", "mock"]


# =============================================================================
# Orchestrator: live and fallback paths
# =============================================================================

class TestLiveAndFallback:

    def test_live_success(self, build, sleeps):
        live = {"events": [{
            "id": 1,
            "homeTeam": {"id": 2, "name": "Arsenal", "shortName": "Arsenal"},
            "awayTeam": {"id": 3, "name": "Chelsea"},
            "homeScore": {"current": 1},
            "awayScore": {"current": 0},
            "status": {"code": 6, "description": "1st half", "type": "inprogress"},
            "tournament": {"name": "Premier League"},
        }]}
        orchestrator, session = build({f"{SOFASCORE_BASE}/sport/football/events/live": MockResponse(json_data=live)})
        result = orchestrator.handle(_sofa("live-matches"))
        assert result.using_mock is False
        assert result.strategy == "primary"
        assert result.payload["events"][0]["homeTeam"]["name"] == "Arsenal"
        assert sleeps == []  # no latency on live paths

    def test_statistics_fallback_url_success(self, build):
        stats = {"statistics": [{"period": "ALL", "groups": [{"statisticsItems": [
            {"key": "ballPossession", "homeValue": 61, "awayValue": 39},
        ]}]}]}
        orchestrator, session = build({
            f"{SOFASCORE_BASE}/event/5/statistics": MockResponse(status_code=404),
            f"{SOFASCORE_BASE}/match/5/statistics": MockResponse(json_data=stats),
        })
        result = orchestrator.handle(_sofa("match-statistics/5"))
        assert result.strategy == "statistics-fallback"
        assert result.using_mock is False
        assert result.payload["statistics"]["periods"]["ALL"]["possession"] == {"home": 61, "away": 39}
        assert session.urls == [
            f"{SOFASCORE_BASE}/event/5/statistics",
            f"{SOFASCORE_BASE}/match/5/statistics",
        ]

    def test_both_statistics_urls_fail_then_mock(self, build, sleeps):
        orchestrator, session = build(mock_delay_ms=300)
        result = orchestrator.handle(_sofa("match-statistics/10001"))
        assert result.using_mock is True
        assert len(session.calls) == 2
        assert result.payload["statistics"]["periods"]["ALL"]["possession"] == {"home": 45, "away": 55}
        assert sleeps == [0.3]

    def test_upstream_failure_falls_back(self, build):
        orchestrator, session = build({f"{SOFASCORE_BASE}/event/10002": MockResponse(status_code=503)})
        result = orchestrator.handle(_sofa("match/10002"))
        assert result.using_mock is True
        assert result.payload["event"]["id"] == 10002
        assert [a.ok for a in result.attempts] == [False, True]

    def test_football_data_live(self, build):
        live = {"matches": [{"id": 9, "status": "IN_PLAY", "homeTeam": {"name": "A"}, "awayTeam": {"name": "B"}}]}
        url = f"{FOOTBALL_DATA_BASE}/matches?status=LIVE,IN_PLAY,PAUSED"
        orchestrator, session = build({url: MockResponse(json_data=live)}, football_data_api_key="k")
        result = orchestrator.handle(_fd("matches/live"))
        assert result.using_mock is False
        assert result.payload["resultSet"]["count"] == 1
        assert result.payload["matches"][0]["status"] == "IN_PLAY"
        assert session.calls[0]["headers"]["X-Auth-Token"] == "k"


# =============================================================================
# Orchestrator: mock lookups
# =============================================================================

class TestMockLookups:

    def test_unknown_statistics_are_synthesized(self, build):
        orchestrator, _ = build()
        result = orchestrator.handle(_sofa("match-statistics/99999"), use_mock=True)
        assert result.is_default is True
        assert result.using_mock is True
        block = result.payload["statistics"]["periods"]["ALL"]
        assert block["possession"] == {"home": 50, "away": 50}

    @pytest.mark.parametrize("endpoint", ["match/99999", "match-lineups/99999", "match-events/99999"])
    def test_unknown_match_not_found(self, build, endpoint):
        orchestrator, _ = build()
        with pytest.raises(NotFoundError):
            orchestrator.handle(_sofa(endpoint), use_mock=True)

    def test_football_data_detail_has_head_to_head(self, build):
        orchestrator, _ = build()
        result = orchestrator.handle(_fd("matches/10001"))
        assert result.payload["head2head"]["numberOfMatches"] == 10
        assert result.payload["homeTeam"]["id"] == 100010

    def test_football_data_unknown_match(self, build):
        orchestrator, _ = build()
        with pytest.raises(NotFoundError):
            orchestrator.handle(_fd("matches/424242"))

    def test_catalog_view_detail(self, build):
        orchestrator, _ = build()
        result = orchestrator.catalog_view("match/10001")
        assert result.payload["match"]["id"] == 10001
        assert result.payload["statistics"]["periods"]["ALL"]["possession"] == {"home": 45, "away": 55}
        assert result.payload["lineups"]["home"]["formation"] == "4-3-3"

    def test_catalog_view_without_lineup_record(self, build):
        orchestrator, _ = build()
        result = orchestrator.catalog_view("match/10002")
        assert result.payload["lineups"] is None

    def test_catalog_view_rejects_other_endpoints(self, build):
        orchestrator, _ = build()
        with pytest.raises(UnknownEndpointError):
            orchestrator.catalog_view("match-statistics/10001")
