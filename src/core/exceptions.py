"""Error taxonomy shared by the gateways and the agent pipeline."""


class SearchwiseError(Exception):
    """Base exception for Searchwise errors.

    Every subclass carries the HTTP status it is reported with at the
    endpoint boundary.
    """

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SearchwiseError):
    """Raised when a required request field is missing or empty."""

    status_code = 400


class UpstreamError(SearchwiseError):
    """Raised when the search or completion provider call fails."""

    status_code = 500


class PlanningError(SearchwiseError):
    """Raised when the sub-query plan cannot be parsed after all attempts."""

    status_code = 500


class SubQueryParseError(ValueError):
    """Raised when an LLM reply is not a JSON array of sub-queries."""

    pass
