"""Exceptions raised by the analysis core."""


class AnalysisError(Exception):
    """Base class for analysis failures."""


class LogTooLargeError(AnalysisError):
    """Raised when a battle log exceeds the configured size ceiling."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Battle log is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit
