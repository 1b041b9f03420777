"""Refresh cooldown for live match lists."""

from datetime import datetime, timezone
from threading import Lock
from time import time
from typing import Dict, Optional, Tuple

from pitchside.errors import CooldownActiveError

# Configuration
DEFAULT_COOLDOWN_SECONDS = 600  # Ten minutes between live refreshes


def format_time_remaining(seconds: float) -> str:
    """Format remaining wait as "m:ss", or "Ready" once it has elapsed."""
    if seconds <= 0:
        return "Ready"
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


class RefreshCooldown:
    """
    Tracks the next permitted live refresh per client (IP or session).

    Thread-safe. Enforcement is optional: when disabled the tracker only
    stamps the next permitted time so the UI can show a countdown.
    """

    def __init__(
        self,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
        enforce: bool = False,
    ):
        self.cooldown_seconds = cooldown_seconds
        self.enforce = enforce
        self._next_allowed: Dict[str, float] = {}
        self._lock = Lock()

    def check(self, client_id: str) -> Tuple[bool, Optional[int]]:
        """
        Check whether a refresh is allowed for the given client and, if so,
        start a new cooldown window.

        Returns:
            Tuple of (allowed: bool, retry_after_seconds: Optional[int])
        """
        now = time()

        with self._lock:
            self._evict_expired(now)
            next_allowed = self._next_allowed.get(client_id)
            if self.enforce and next_allowed is not None and now < next_allowed:
                retry_after = int(next_allowed - now) + 1
                return False, max(1, retry_after)

            self._next_allowed[client_id] = now + self.cooldown_seconds
            return True, None

    def acquire(self, client_id: str) -> None:
        """Like check(), but raises CooldownActiveError when blocked."""
        allowed, retry_after = self.check(client_id)
        if not allowed:
            raise CooldownActiveError(
                retry_after=retry_after,
                message=f"Please wait {format_time_remaining(retry_after)} before refreshing",
            )

    def remaining(self, client_id: str) -> float:
        """Seconds until the client may refresh again (0 when ready)."""
        with self._lock:
            next_allowed = self._next_allowed.get(client_id)
        if next_allowed is None:
            return 0.0
        return max(0.0, next_allowed - time())

    def next_refresh_at(self, client_id: str) -> Optional[str]:
        """ISO timestamp of the next permitted refresh, if a window is open."""
        with self._lock:
            next_allowed = self._next_allowed.get(client_id)
        if next_allowed is None:
            return None
        moment = datetime.fromtimestamp(next_allowed, tz=timezone.utc)
        return moment.isoformat(timespec="seconds").replace("+00:00", "Z")

    def reset(self, client_id: str) -> None:
        """Clear the cooldown for a specific client."""
        with self._lock:
            self._next_allowed.pop(client_id, None)

    def cleanup(self) -> int:
        """
        Remove clients whose window has already elapsed.

        Returns the number of clients cleaned up.
        """
        with self._lock:
            return self._evict_expired(time())

    def _evict_expired(self, now: float) -> int:
        # Caller holds the lock
        expired = [cid for cid, ts in self._next_allowed.items() if ts <= now]
        for client_id in expired:
            del self._next_allowed[client_id]
        return len(expired)
