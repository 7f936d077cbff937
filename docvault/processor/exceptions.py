class ProcessorError(Exception):
    """Base exception for all job processing errors."""


class ProjectNotFoundError(ProcessorError):
    """Raised when a job references a project that does not exist."""


class UnsupportedJobKindError(ProcessorError):
    """Raised when no pipeline is registered for a job kind."""


class MissingJobFieldError(ProcessorError):
    """Raised when a job row lacks a field its pipeline needs."""
