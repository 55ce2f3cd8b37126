"""Error taxonomy shared by the relay and its clients.

- BadRequest:    caller input is missing or malformed (HTTP 400, not retried)
- UpstreamError: the LLM call failed, timed out, or returned unusable JSON (HTTP 500)
- NetworkError:  the client could not reach the relay at all
"""


class ToneError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequest(ToneError):
    status_code = 400


class UpstreamError(ToneError):
    status_code = 500


class NetworkError(ToneError):
    status_code = 503


class EmptyResultError(UpstreamError):
    """The model answered, but with nothing a caller could use."""
