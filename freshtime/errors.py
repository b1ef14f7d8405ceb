"""Error types raised by freshtime."""
from typing import List, Optional


class FreshtimeError(Exception):
    """Base class for every error the CLI reports to the user."""


class ConfigError(FreshtimeError):
    """Missing or invalid configuration."""


class ValidationError(FreshtimeError):
    """User input that cannot be acted on."""


class DecodeError(FreshtimeError):
    """A response body that is not the JSON we expected."""


class ApiError(FreshtimeError):
    """A non-2xx response from the FreshBooks API."""

    def __init__(self, status: int, status_text: str, body: str):
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(f"API error {status} {status_text}: {body}")


class AuthExpiredError(ApiError):
    """A 401 that could not be recovered by refreshing the token."""

    def __init__(self, body: str = "Session expired. Run `freshtime setup` to re-authenticate."):
        super().__init__(401, "Unauthorized", body)


class BillingError(FreshtimeError):
    """Marking entries as billed stopped part-way through."""

    def __init__(self, marked: List[int], pending: List[int], cause: Optional[Exception] = None):
        self.marked = marked
        self.pending = pending
        self.cause = cause
        pending_str = ", ".join(str(i) for i in pending)
        super().__init__(
            f"{len(marked)} entries marked as billed, {len(pending)} still unbilled "
            f"({pending_str}): {cause}"
        )
