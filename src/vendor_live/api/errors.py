"""Map typed service errors to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from vendor_live.errors import (
    Conflict,
    InvalidArgument,
    NoActiveSession,
    NotApproved,
    NotFound,
    PermissionDenied,
    SessionAlreadyActive,
    UpstreamUnavailable,
    VendorLiveError,
)

_STATUS_BY_KIND = {
    InvalidArgument.kind: status.HTTP_400_BAD_REQUEST,
    PermissionDenied.kind: status.HTTP_403_FORBIDDEN,
    NotApproved.kind: status.HTTP_403_FORBIDDEN,
    NotFound.kind: status.HTTP_404_NOT_FOUND,
    Conflict.kind: status.HTTP_409_CONFLICT,
    SessionAlreadyActive.kind: status.HTTP_409_CONFLICT,
    NoActiveSession.kind: status.HTTP_409_CONFLICT,
    UpstreamUnavailable.kind: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def register_error_handlers(app: FastAPI) -> None:
    """Install the handler that renders VendorLiveError subclasses."""

    @app.exception_handler(VendorLiveError)
    async def vendor_live_error_handler(
        request: Request, exc: VendorLiveError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_STATUS_BY_KIND.get(
                exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
            content={"error": exc.kind, "message": exc.message},
        )
