"""
Engine models - error types and query descriptors shared by all upstream engines.
"""

from enum import Enum, IntFlag


class EngineErrorType(Enum):
    """Kind of failure an upstream engine can report"""
    # No matching engine found
    NO_SUCH_ENGINE_FOUND = "NoSuchEngineFound"
    # Upstream answered but had no results for the query
    EMPTY_RESULT_SET = "EmptyResultSet"
    # Connection failures, timeouts, forbidden, not found, etc.
    REQUEST_ERROR = "RequestError"
    # Markup changes, parser failures and everything else
    UNEXPECTED_ERROR = "UnexpectedError"


_MESSAGES = {
    EngineErrorType.NO_SUCH_ENGINE_FOUND: "No such engine with the name '{engine}' found",
    EngineErrorType.EMPTY_RESULT_SET: "The upstream search engine returned an empty result set",
    EngineErrorType.REQUEST_ERROR: "Error occurred while requesting data from upstream search engine",
    EngineErrorType.UNEXPECTED_ERROR: "An unexpected error occurred while processing the data",
}

# Used by the frontend to pick the badge colour
_SEVERITY = {
    EngineErrorType.REQUEST_ERROR: 0,
    EngineErrorType.EMPTY_RESULT_SET: 1,
    EngineErrorType.UNEXPECTED_ERROR: 2,
    EngineErrorType.NO_SUCH_ENGINE_FOUND: 2,
}


class EngineError(Exception):
    """
    Error raised while requesting or processing data from an upstream engine.

    Attributes:
        error_type: The kind of error that occurred
        engine: Name of the engine that raised the error
    """

    def __init__(self, error_type: EngineErrorType, engine: str):
        self.error_type = error_type
        self.engine = engine
        super().__init__(str(self))

    def __str__(self) -> str:
        return _MESSAGES[self.error_type].format(engine=self.engine)

    def __repr__(self) -> str:
        return f"EngineError({self.error_type.name}, engine={self.engine!r})"

    @property
    def severity_level(self) -> int:
        return _SEVERITY[self.error_type]


class QueryType(IntFlag):
    """Type of results a query asks for; engines advertise a combination"""
    TEXT = 0b00001
    VIDEO = 0b00010
    IMAGE = 0b00100
    # Also covers torrent files
    FILE = 0b01000
    AUTO_COMPLETION = 0b10000


class TimeRelevancy(Enum):
    """Time window the results must fall within"""
    ANYTIME = "anytime"
    LAST_DAY = "day"
    LAST_WEEK = "week"
    LAST_MONTH = "month"
    LAST_YEAR = "year"

    @classmethod
    def from_string(cls, value: str) -> 'TimeRelevancy':
        """
        Parse a time relevancy from its query-string form.

        Raises:
            ValueError: If the value is not one of anytime, day, week, month, year
        """
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown time relevancy: {value!r}")
