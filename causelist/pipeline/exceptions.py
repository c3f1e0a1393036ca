class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""


class PipelineBusyError(PipelineError):
    """Raised when run() is called while a run is already in progress."""


class FileReadError(PipelineError):
    """Raised when a document file cannot be read from disk."""
