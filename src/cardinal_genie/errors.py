"""Error taxonomy for Cardinal Genie.

Hides the classification of failures from the modules that raise them:
- Request-level failures (surfaced once to the user)
- Decode-level failures (recovered silently by the decoder/extractor)
- Workflow-level failures (surfaced as a "could not parse" notice)
"""


class GenieError(Exception):
    """Base class for all Cardinal Genie errors."""


class RequestFailed(GenieError):
    """The completion or logo request did not produce a readable response.

    Raised for non-success HTTP statuses, missing bodies, transport errors
    and read timeouts.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class MalformedFrame(GenieError):
    """A `data:` line whose payload is not valid JSON."""


class MalformedBlock(GenieError):
    """A chart/metrics fence whose body is not valid JSON of the expected shape."""


class ParseFailure(GenieError):
    """A workflow could not locate a JSON value in the final model text."""


class MissingInformation(GenieError):
    """Required workflow fields were left empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            "Please complete all required fields: " + ", ".join(fields)
        )
