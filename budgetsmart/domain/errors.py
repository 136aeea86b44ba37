class FetchError(Exception):
    """A repository read failed; the original error is kept as ``__cause__``."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class NotFoundError(LookupError):
    pass
