"""
Errors surfaced by the journey client.
Each failure kind is its own class so callers can tell
"try later" (rate limits, network) from "permanently malformed".
"""


class JourneyClientError(RuntimeError):
    default_message = "Journey client error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class InvalidResponse(JourneyClientError):
    default_message = "Invalid response format from Grok API"


class JsonParsingFailed(JourneyClientError):
    default_message = "Failed to parse JSON response from Grok API"


class JsonSerializationFailed(JourneyClientError):
    default_message = "Failed to serialize request data"


class NetworkError(JourneyClientError):
    def __init__(self, cause: Exception, status_code: int | None = None):
        self.cause = cause
        self.status_code = status_code
        super().__init__(f"Network error: {cause}")


class ApiError(JourneyClientError):
    def __init__(self, message: str, code: int | None = None):
        self.api_message = message
        self.code = code
        super().__init__(f"API error: {message}")


class RateLimitExceeded(JourneyClientError):
    default_message = "Rate limit exceeded - too many requests"

    def __init__(self, message: str | None = None, status_code: int = 429):
        self.status_code = status_code
        super().__init__(message)


class MaxRetriesExceeded(JourneyClientError):
    def __init__(self, attempts: int, last_error: Exception | None = None):
        self.attempts = attempts
        self.last_error = last_error
        msg = f"Maximum retry attempts exceeded ({attempts})"
        if last_error is not None:
            msg = f"{msg}: {last_error}"
        super().__init__(msg)
