"""Display-only countdown derived from persisted session state.

Nothing here decides whether a session is active. Use
``LiveSessionService.is_expired`` for that.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from vendor_live.domain.live_sessions import LiveSession

CLOSING_AFTER = timedelta(hours=7)
SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class Countdown:
    """Presentation view of a session's remaining time."""

    has_timer: bool
    seconds_remaining: int | None
    display: str | None
    presence: str


def remaining(now: datetime, auto_end_time: datetime | None) -> timedelta | None:
    """Return time left until ``auto_end_time``, clamped at zero.

    Open-ended sessions have no deadline and return None.
    """
    if auto_end_time is None:
        return None
    return max(auto_end_time - now, timedelta(0))


def format_remaining(left: timedelta) -> str:
    """Format remaining time as ``mm:ss``, or ``h:mm:ss`` from one hour up."""
    total = int(left.total_seconds())
    hours, rest = divmod(total, SECONDS_PER_HOUR)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def presence_status(session: LiveSession | None, now: datetime) -> str:
    """Return ``open``, ``closing`` or ``offline`` for map markers."""
    if session is None or not session.is_active:
        return "offline"
    if now - session.start_time >= CLOSING_AFTER:
        return "closing"
    return "open"


def build_countdown(session: LiveSession | None, now: datetime) -> Countdown:
    """Derive the countdown view for a session."""
    left = remaining(now, session.auto_end_time) if session else None
    return Countdown(
        has_timer=left is not None,
        seconds_remaining=int(left.total_seconds()) if left is not None else None,
        display=format_remaining(left) if left is not None else None,
        presence=presence_status(session, now),
    )
