"""Error taxonomy shared by coordinators, services and routes."""


class StudioError(Exception):
    """Base class for studio errors. `message` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(StudioError):
    """A required field is missing; the request never reaches the capability."""


class GenerationFailure(StudioError):
    """The generative capability rejected the request or failed to answer."""


class SubmissionRejected(StudioError):
    """A submission arrived while the tool scope already has one in flight."""


class NotFound(StudioError):
    """Referenced history entry (or similar) does not exist."""


class PersistenceFailure(StudioError):
    """Stored payload is malformed or unreadable. Swallowed by the store."""


class SearchFailure(StudioError):
    """Bibliographic search failed. Swallowed by the search service."""
