"""Exceptions raised by the writing client."""


class WriterError(Exception):
    """Base class for writing client errors."""


class ValidationError(WriterError):
    """Input rejected locally before any request is sent."""


class ApiError(WriterError):
    """The server answered with an error, or could not be reached.

    ``message`` is the first entry of the envelope's ``errors`` list when the
    server sent one, so it can be shown to the user unchanged.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class PublishFailed(ApiError):
    """A publish or update request failed."""


class SubmissionInProgress(WriterError):
    """A submission is already in flight for this session."""


__all__ = ["WriterError", "ValidationError", "ApiError", "PublishFailed", "SubmissionInProgress"]
