"""
Response classification for VardexPay endpoints.

Several endpoints answer with a bare status string instead of a JSON
object. Those strings are modelled as a closed ``Sentinel`` enumeration and
each endpoint gets an ordered table mapping its known rejection sentinels
to exception classes. Anything outside the table that is not the success
sentinel falls through to ``UnknownError``.
"""

from __future__ import annotations

import enum
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence, Type

import httpx

from vardexpay.exchange.exceptions import (
    ActionLock,
    AmountLimit,
    FillFields,
    InvalidCardNumber,
    InvalidCredentials,
    NotEnoughMoney,
    ResponseError,
    TfaRequired,
    UnknownError,
    VardexPayError,
)
from vardexpay.exchange.models import ExchangeRatio


class Sentinel(str, enum.Enum):
    SUCCESS = "Safality"
    FILL_FIELDS = "FillFields"
    INVALID_CARD_NUMBER = "InvalidCardNumber"
    NOT_ENOUGH_MONEY = "NotEnoughMoney"
    ACTION_LOCK = "ActionLock"
    AMOUNT_LIMIT = "AmountLimit"


SentinelTable = Dict[Sentinel, Type[VardexPayError]]

CARD_WITHDRAW_ERRORS: SentinelTable = {
    Sentinel.FILL_FIELDS: FillFields,
    Sentinel.INVALID_CARD_NUMBER: InvalidCardNumber,
    Sentinel.NOT_ENOUGH_MONEY: NotEnoughMoney,
    Sentinel.ACTION_LOCK: ActionLock,
}

CRYPTO_WITHDRAW_ERRORS: SentinelTable = {
    Sentinel.FILL_FIELDS: FillFields,
    Sentinel.NOT_ENOUGH_MONEY: NotEnoughMoney,
    Sentinel.ACTION_LOCK: ActionLock,
    Sentinel.AMOUNT_LIMIT: AmountLimit,
}

# Quoted per 100 units upstream for these source currencies.
INVERSED_SYMBOLS = frozenset({"TRX", "XRP", "USDT"})
RATIO_SCALE = 10000000000


def decode_body(resp: httpx.Response) -> Any:
    """Parse a response body as JSON, falling back to raw text."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def classify_login(body: Any, session_token: Optional[str]) -> str:
    """Return the session token for a successful login or raise its failure."""
    if not body:
        raise UnknownError()
    if isinstance(body, dict) and body.get("tfa"):
        raise TfaRequired()
    if not isinstance(body, str):
        raise UnknownError()
    if body != Sentinel.SUCCESS.value:
        raise ResponseError()
    if not session_token:
        raise InvalidCredentials()
    return session_token


def classify_sentinel(body: Any, table: SentinelTable) -> str:
    """Return the success sentinel or raise the failure mapped by ``table``."""
    if isinstance(body, str):
        for sentinel, error_cls in table.items():
            if body == sentinel.value:
                raise error_cls()
        if body == Sentinel.SUCCESS.value:
            return body
    raise UnknownError()


def normalize_ratio(from_currency: str, raw: Any) -> ExchangeRatio:
    """
    Apply the upstream ratio quirks to a raw ``[rate, scale]`` pair.

    - rate is multiplied by 100 with exact decimal math when the source
      currency is one of INVERSED_SYMBOLS
    - scale is always forced to RATIO_SCALE
    """
    if not isinstance(raw, Sequence) or isinstance(raw, str) or len(raw) != 2:
        raise UnknownError()
    rate, scale = raw[0], raw[1]
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise UnknownError()

    if from_currency in INVERSED_SYMBOLS:
        rate = float(Decimal(str(rate)) * 100)
    if scale != RATIO_SCALE:
        scale = RATIO_SCALE

    return (rate, scale)
