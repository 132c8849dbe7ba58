class GradientGenError(Exception):
    """Base class for gradientgen errors."""


class StorageError(GradientGenError):
    """The cache storage could not be read or written."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
