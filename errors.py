class CacheSimError(Exception):
    pass

class InvalidConstructionParams(CacheSimError, ValueError):
    """Raised when a cache or address codec is configured with unusable parameters."""

class InvalidAccessInput(CacheSimError, ValueError):
    """Raised when an access is missing its address or has an unknown operation."""

class MalformedTraceRecord(CacheSimError):
    """Raised when a trace line has a mode other than R or W. Processing stops."""

    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"{line_number}: malformed trace record {line!r}")
