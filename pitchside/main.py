"""
Pitchside - Main FastAPI Application
Live football data proxied from SofaScore and Football-Data.org, with mock fallback
"""
import logging
from typing import Optional

import requests
from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from config.settings import Settings
from pitchside.cooldown import RefreshCooldown
from pitchside.endpoints import EndpointKind, EndpointRequest, Provider, parse_endpoint
from pitchside.errors import ProxyError
from pitchside.fallback import FallbackOrchestrator, ProxyResult
from pitchside.mock_data import MockCatalog, load_mock_catalog
from pitchside.upstream import FootballDataClient, SofaScoreClient

load_dotenv()

logger = logging.getLogger("pitchside.main")

# Version tracking
APP_VERSION = "v0.1.0"
APP_NAME = "Pitchside"

SOURCE_HEADER = "X-Pitchside-Source"


def _client_id(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


def _parse_use_mock(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[MockCatalog] = None,
    session: Optional[requests.Session] = None,
) -> FastAPI:
    """
    Build the application.

    Settings and the mock catalog are constructed once here and shared
    read-only by every request. Upstream calls use a standalone GET each unless
    a session is injected.
    """
    settings = settings or Settings()
    catalog = catalog or load_mock_catalog()

    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=APP_NAME,
        description="Live football match data with mock-data fallback",
        version=APP_VERSION,
    )

    orchestrator = FallbackOrchestrator(
        settings=settings,
        catalog=catalog,
        clients={
            Provider.SOFASCORE: SofaScoreClient(settings, session),
            Provider.FOOTBALL_DATA: FootballDataClient(settings, session),
        },
    )
    cooldown = RefreshCooldown(
        cooldown_seconds=settings.refresh_cooldown_seconds,
        enforce=settings.enforce_refresh_cooldown,
    )

    app.state.settings = settings
    app.state.catalog = catalog
    app.state.orchestrator = orchestrator
    app.state.cooldown = cooldown

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.exception_handler(ProxyError)
    def proxy_error_handler(request: Request, exc: ProxyError):
        headers = {}
        retry_after = getattr(exc, "retry_after", None)
        if retry_after:
            headers["Retry-After"] = str(retry_after)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(Exception)
    def internal_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error serving {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # =========================================================================
    # HELPERS
    # =========================================================================

    def respond(result: ProxyResult, body: Optional[dict] = None) -> JSONResponse:
        return JSONResponse(
            content=body if body is not None else result.to_dict(),
            headers={SOURCE_HEADER: result.strategy},
        )

    def serve(provider: Provider, endpoint: Optional[str], use_mock: Optional[str], req: Request) -> JSONResponse:
        decoded: EndpointRequest = parse_endpoint(provider, endpoint)
        client_id = _client_id(req)
        is_live_list = decoded.kind is EndpointKind.LIVE_MATCHES

        if is_live_list:
            cooldown.acquire(client_id)

        result = orchestrator.handle(decoded, use_mock=_parse_use_mock(use_mock))
        body = result.to_dict()
        if is_live_list:
            body["nextRefreshAt"] = cooldown.next_refresh_at(client_id)
        return respond(result, body)

    # =========================================================================
    # SERVICE ENDPOINTS
    # =========================================================================

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/version")
    def version_info():
        """Version information endpoint."""
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "full": f"{APP_NAME} {APP_VERSION}",
        }

    # =========================================================================
    # PROXY ENDPOINTS
    # =========================================================================

    @app.get("/api/sofascore")
    def sofascore_proxy(
        req: Request,
        endpoint: Optional[str] = Query(None, description="live-matches, match/{id}, match-statistics/{id}, ..."),
        useMock: Optional[str] = Query(None, description="'true' to skip the live provider"),
    ):
        """
        SofaScore proxy.

        Logical endpoints: live-matches, match/{id}, match-statistics/{id},
        match-lineups/{id}, match-events/{id}. Falls back to mock data when
        SofaScore is unavailable; `usingMockData` reports provenance.
        """
        return serve(Provider.SOFASCORE, endpoint, useMock, req)

    @app.get("/api/sofascore/env")
    def sofascore_env():
        """Capability check: SofaScore needs no API key."""
        enabled = settings.sofascore_enabled
        return {
            "hasApiKey": enabled,
            "message": "Using direct SofaScore API" if enabled else "SofaScore disabled, using mock data",
        }

    @app.get("/api/football-data")
    def football_data_proxy(
        req: Request,
        endpoint: Optional[str] = Query(None, description="matches/live or matches/{id}"),
        useMock: Optional[str] = Query(None, description="'true' to skip the live provider"),
    ):
        """
        Football-Data.org proxy.

        Without FOOTBALL_DATA_API_KEY every request is served from mock data
        rendered in the Football-Data.org document shape.
        """
        return serve(Provider.FOOTBALL_DATA, endpoint, useMock, req)

    @app.get("/api/football-data/env")
    def football_data_env():
        """Capability check: reports whether a key is configured, never the key itself."""
        has_key = settings.has_football_data_key
        return {
            "hasApiKey": has_key,
            "message": (
                "Football-Data.org API key is configured"
                if has_key
                else "No Football-Data.org API key found, using mock data"
            ),
        }

    @app.get("/api/mock-football")
    def mock_football(
        endpoint: Optional[str] = Query(None, description="live-matches or match/{id}"),
    ):
        """Browse the mock catalog directly."""
        return respond(orchestrator.catalog_view(endpoint))

    return app


app = create_app()
