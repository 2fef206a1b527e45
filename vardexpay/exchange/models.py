"""Request and response shapes for the VardexPay API.

These are typing-only views of the JSON bodies. The client returns parsed
JSON as-is and does not validate it against these shapes.
"""

from typing import Dict, List, Literal, Optional, Tuple, Union

from typing_extensions import NotRequired, TypedDict


# (rate, scale) as returned by the exchange ratio endpoint.
ExchangeRatio = Tuple[float, int]

MinorBalances = Dict[str, float]

TransferStatus = Literal["process", "success"]
TransferType = Literal["transfer", "exchange", "top-up"]


class RateEntry(TypedDict):
    currency: str
    minor: int
    networks: List[str]
    btc: float
    usd: float


class Wallet(TypedDict):
    _id: NotRequired[str]
    type: Literal["crypto", "fiat"]
    network: Optional[str]
    currency: str
    balance: float


class GetWalletsResponse(TypedDict):
    baseBalance: str
    baseCurrency: str
    minors: MinorBalances
    wallets: List[Wallet]


class TransferSource(TypedDict):
    walletId: str
    currency: str
    network: Optional[str]


class TransferReceiver(TypedDict):
    address: str
    dest_tag: str


class TransferDestination(TypedDict):
    currency: str
    receiver: TransferReceiver


# "from" is a keyword, so the functional syntax is required here.
Transfer = TypedDict(
    "Transfer",
    {
        "_id": str,
        "amount": float,
        "from": TransferSource,
        "to": TransferDestination,
        "status": TransferStatus,
        "type": TransferType,
        "numId": int,
        "timestamp": int,
    },
)


class TransfersListResponse(TypedDict):
    transactions: List[Transfer]
    wallets: List[MinorBalances]


# ---------------------------------------------------------------------------
# Withdrawal options
# ---------------------------------------------------------------------------

class WithdrawCryptoOptions(TypedDict):
    currency: str
    amount: str  # decimal string
    receiver: str  # wallet address


class WithdrawCardAdditional(TypedDict):
    birthday: str
    cardHolder: str
    cardExpire: str  # e.g. "12/25"


class _CardOptions(TypedDict):
    currency: Literal["USD", "RUB", "INR", "TRY"]
    amount: str
    receiver: str  # card number
    country: str  # issuer country, e.g. "ru"
    additional: NotRequired[WithdrawCardAdditional]


class _EurCardOptions(TypedDict):
    currency: Literal["EUR"]
    amount: str
    receiver: str
    country: str
    additional: WithdrawCardAdditional


WithdrawCardOptions = Union[_CardOptions, _EurCardOptions]
