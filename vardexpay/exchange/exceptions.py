"""Typed exception hierarchy for VardexPay API operations.

Each failure carries a stable string ``code`` so callers can branch on it
or forward it unchanged. None of these are retried by the client.
"""

from __future__ import annotations

import enum
from typing import Dict, Type


class ErrorCode(str, enum.Enum):
    UNKNOWN_ERROR = "unknown-error"
    TFA_REQUIRED = "tfa-required"
    RESPONSE_ERROR = "response-error"
    INVALID_CREDENTIALS = "invalid-credentials"
    FILL_FIELDS = "fill-fields"
    INVALID_CARD_NUMBER = "invalid-card-number"
    NOT_ENOUGH_MONEY = "not-enough-money"
    ACTION_LOCK = "action-lock"
    AMOUNT_LIMIT = "amount-limit"
    NOT_AUTHENTICATED = "not-authenticated"


class VardexPayError(Exception):
    """Base class for all VardexPay API failures."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message or self.code.value)


class UnknownError(VardexPayError):
    """Response body did not match anything the endpoint is known to return."""
    code = ErrorCode.UNKNOWN_ERROR


class ResponseError(VardexPayError):
    """Login answered with a string other than the success sentinel."""
    code = ErrorCode.RESPONSE_ERROR


class NotAuthenticated(VardexPayError):
    """Authenticated call attempted before login (strict mode only)."""
    code = ErrorCode.NOT_AUTHENTICATED


# ---------------------------------------------------------------------------
# Login failures
# ---------------------------------------------------------------------------

class AuthenticationError(VardexPayError):
    """Login did not produce a session."""


class TfaRequired(AuthenticationError):
    code = ErrorCode.TFA_REQUIRED


class InvalidCredentials(AuthenticationError):
    code = ErrorCode.INVALID_CREDENTIALS


# ---------------------------------------------------------------------------
# Withdrawal rejections
# ---------------------------------------------------------------------------

class WithdrawalRejected(VardexPayError):
    """Withdrawal endpoint answered with a known rejection sentinel."""


class FillFields(WithdrawalRejected):
    code = ErrorCode.FILL_FIELDS


class InvalidCardNumber(WithdrawalRejected):
    code = ErrorCode.INVALID_CARD_NUMBER


class NotEnoughMoney(WithdrawalRejected):
    code = ErrorCode.NOT_ENOUGH_MONEY


class ActionLock(WithdrawalRejected):
    code = ErrorCode.ACTION_LOCK


class AmountLimit(WithdrawalRejected):
    code = ErrorCode.AMOUNT_LIMIT


_ERRORS_BY_CODE: Dict[ErrorCode, Type[VardexPayError]] = {
    cls.code: cls
    for cls in (
        UnknownError,
        ResponseError,
        NotAuthenticated,
        TfaRequired,
        InvalidCredentials,
        FillFields,
        InvalidCardNumber,
        NotEnoughMoney,
        ActionLock,
        AmountLimit,
    )
}


def error_for_code(code: str) -> Type[VardexPayError]:
    """Map an error code string to its exception class (UnknownError if unmapped)."""
    try:
        return _ERRORS_BY_CODE[ErrorCode(code)]
    except ValueError:
        return UnknownError
