"""Typed errors raised by the vendor status and live-session services."""


class VendorLiveError(Exception):
    """Base class for precondition and state errors.

    ``kind`` is a stable identifier callers branch on instead of the message.
    """

    kind = "vendor_live_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(VendorLiveError):
    """Malformed or missing input."""

    kind = "invalid_argument"


class NotFound(VendorLiveError):
    """Unknown vendor or session id."""

    kind = "not_found"


class NotApproved(VendorLiveError):
    """Vendor is not allowed to go live with its current status."""

    kind = "not_approved"


class PermissionDenied(VendorLiveError):
    """Actor lacks the role required by the operation."""

    kind = "permission_denied"


class Conflict(VendorLiveError):
    """A concurrent writer won the race for the same row."""

    kind = "conflict"


class SessionAlreadyActive(Conflict):
    """Vendor already has an active live session."""

    kind = "session_already_active"


class NoActiveSession(VendorLiveError):
    """Vendor has no active live session to close."""

    kind = "no_active_session"


class UpstreamUnavailable(VendorLiveError):
    """An external collaborator failed or timed out."""

    kind = "upstream_unavailable"
