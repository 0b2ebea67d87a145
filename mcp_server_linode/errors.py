"""Error taxonomy shared by the dispatcher, the decoder and the handlers."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Sequence


class ArgumentReason(str, Enum):
    """Why a single argument was rejected."""

    MISSING = "missing"
    WRONG_KIND = "wrong_kind"
    EMPTY = "empty"
    OUT_OF_RANGE = "out_of_range"


class ServerError(Exception):
    """Base class for every error the server reports.

    ``tool_level`` errors become a well-formed result with ``isError=True``;
    the remaining ones are transport-level failures.
    """

    kind = "error"
    tool_level = True

    def payload(self) -> Dict[str, object]:
        return {"status": self.kind, "error": str(self)}


class UnknownToolError(ServerError):
    kind = "unknown_tool"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ArgumentError(ServerError):
    """Raised by the decoder for the first offending field."""

    kind = "argument_error"

    def __init__(self, field: str, reason: ArgumentReason, detail: str = "") -> None:
        message = f"Invalid argument '{field}': {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.field = field
        self.reason = reason
        self.detail = detail

    def payload(self) -> Dict[str, object]:
        data = super().payload()
        data["field"] = self.field
        data["reason"] = self.reason.value
        return data


class AccountError(ServerError):
    kind = "account_error"


class NoCurrentAccountError(AccountError):
    def __init__(self) -> None:
        super().__init__("No current account is selected; switch to a configured account first")


class UnknownAccountError(AccountError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown account: {name!r}")
        self.name = name


class DuplicateAccountError(AccountError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Account {name!r} is already registered")
        self.name = name


class InvalidCredentialError(AccountError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid credential for account {name!r}: {reason}")
        self.name = name


class UpstreamError(ServerError):
    """A failed call against the Linode API, carrying its reasons verbatim."""

    kind = "upstream_error"

    def __init__(self, status: Optional[int], reasons: Sequence[str]) -> None:
        self.status = status
        self.reasons: List[str] = [str(reason) for reason in reasons] or ["unknown error"]
        joined = "; ".join(self.reasons)
        if status is None:
            super().__init__(joined)
        else:
            super().__init__(f"[{status}] {joined}")

    def payload(self) -> Dict[str, object]:
        data = super().payload()
        if self.status is not None:
            data["httpStatus"] = self.status
        data["reasons"] = list(self.reasons)
        return data


class InternalInvariantViolation(ServerError):
    """Raised when continuing would leave the agent unable to reason about state."""

    kind = "internal_error"
    tool_level = False
