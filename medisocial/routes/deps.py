"""Shared route dependencies: the session's Studio and error-to-HTTP mapping."""
from fastapi import HTTPException, Request

from medisocial.errors import GenerationFailure, NotFound, StudioError, SubmissionRejected, ValidationFailure
from medisocial.studio import Studio

_STATUS_CODES = (
    (ValidationFailure, 422),
    (SubmissionRejected, 409),
    (NotFound, 404),
    (GenerationFailure, 502),
)


def get_studio(request: Request) -> Studio:
    return request.app.state.studio


def http_error(err: StudioError) -> HTTPException:
    """Map a studio error to an HTTPException carrying its user-facing message."""
    for cls, status_code in _STATUS_CODES:
        if isinstance(err, cls):
            return HTTPException(status_code=status_code, detail=err.message)
    return HTTPException(status_code=500, detail=err.message)
