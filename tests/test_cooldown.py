"""
Tests for the live refresh cooldown.
"""
import pytest

from pitchside.cooldown import RefreshCooldown, format_time_remaining
from pitchside.errors import CooldownActiveError


class _Clock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = _Clock()
    monkeypatch.setattr("pitchside.cooldown.time", fake)
    return fake


@pytest.mark.parametrize("seconds,expected", [
    (0, "Ready"),
    (-5, "Ready"),
    (59, "0:59"),
    (60, "1:00"),
    (600, "10:00"),
    (125.7, "2:05"),
])
def test_format_time_remaining(seconds, expected):
    assert format_time_remaining(seconds) == expected


class TestRefreshCooldown:

    def test_advisory_mode_always_allows(self):
        cooldown = RefreshCooldown(cooldown_seconds=600)
        assert cooldown.check("1.2.3.4") == (True, None)
        assert cooldown.check("1.2.3.4") == (True, None)
        assert cooldown.remaining("1.2.3.4") > 0

    def test_enforced_blocks_second_refresh(self):
        cooldown = RefreshCooldown(cooldown_seconds=600, enforce=True)
        assert cooldown.check("a") == (True, None)
        allowed, retry_after = cooldown.check("a")
        assert allowed is False
        assert 1 <= retry_after <= 601

    def test_clients_are_independent(self):
        cooldown = RefreshCooldown(cooldown_seconds=600, enforce=True)
        cooldown.check("a")
        assert cooldown.check("b") == (True, None)

    def test_acquire_raises_with_message(self):
        cooldown = RefreshCooldown(cooldown_seconds=600, enforce=True)
        cooldown.acquire("a")
        with pytest.raises(CooldownActiveError) as exc_info:
            cooldown.acquire("a")
        assert exc_info.value.message.startswith("Please wait ")
        assert exc_info.value.to_dict()["error"] == "Refresh cooldown active"

    def test_zero_cooldown_never_blocks(self):
        cooldown = RefreshCooldown(cooldown_seconds=0, enforce=True)
        cooldown.acquire("a")
        cooldown.acquire("a")

    def test_reset(self):
        cooldown = RefreshCooldown(cooldown_seconds=600, enforce=True)
        cooldown.check("a")
        cooldown.reset("a")
        assert cooldown.remaining("a") == 0.0
        assert cooldown.next_refresh_at("a") is None
        assert cooldown.check("a") == (True, None)

    def test_next_refresh_at_format(self):
        cooldown = RefreshCooldown(cooldown_seconds=600)
        assert cooldown.next_refresh_at("a") is None
        cooldown.check("a")
        stamp = cooldown.next_refresh_at("a")
        assert stamp.endswith("Z")
        assert "T" in stamp

    def test_cleanup_removes_elapsed_windows(self, clock):
        cooldown = RefreshCooldown(cooldown_seconds=60)
        cooldown.check("a")
        cooldown.check("b")
        clock.now += 61
        assert cooldown.cleanup() == 2
        assert cooldown.next_refresh_at("a") is None

    def test_check_evicts_expired_clients(self, clock):
        cooldown = RefreshCooldown(cooldown_seconds=60)
        cooldown.check("old-client")
        clock.now += 61
        cooldown.check("new-client")
        assert cooldown.next_refresh_at("old-client") is None
        assert cooldown.next_refresh_at("new-client") is not None
        assert cooldown.cleanup() == 0

    def test_open_windows_survive_eviction(self, clock):
        cooldown = RefreshCooldown(cooldown_seconds=60, enforce=True)
        cooldown.check("a")
        clock.now += 30
        cooldown.check("b")
        assert cooldown.check("a")[0] is False


class TestCooldownOverHttp:

    def test_enforced_cooldown_returns_429(self, make_client):
        client = make_client(enforce_refresh_cooldown=True, refresh_cooldown_seconds=600)
        first = client.get("/api/sofascore?endpoint=live-matches&useMock=true")
        assert first.status_code == 200

        second = client.get("/api/sofascore?endpoint=live-matches&useMock=true")
        assert second.status_code == 429
        body = second.json()
        assert body["error"] == "Refresh cooldown active"
        assert body["retryAfter"] >= 1
        assert second.headers["Retry-After"] == str(body["retryAfter"])

    def test_detail_requests_are_not_limited(self, make_client):
        client = make_client(enforce_refresh_cooldown=True)
        client.get("/api/sofascore?endpoint=live-matches&useMock=true")
        for _ in range(3):
            assert client.get("/api/sofascore?endpoint=match/10001&useMock=true").status_code == 200

    def test_advisory_cooldown_stamps_next_refresh(self, make_client):
        client = make_client()
        for _ in range(2):
            response = client.get("/api/football-data?endpoint=matches/live")
            assert response.status_code == 200
            assert response.json()["nextRefreshAt"].endswith("Z")
