class ClassificationError(Exception):
    """Raised when a page cannot be classified."""


class ClassificationResponseError(ClassificationError):
    """Raised when the AI response cannot be parsed into raw case items."""


class ClassificationNetworkError(ClassificationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
