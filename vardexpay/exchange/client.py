from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from vardexpay.core.config import ClientConfig
from vardexpay.core.logger import get_logger, log_performance
from vardexpay.exchange.exceptions import NotAuthenticated, VardexPayError
from vardexpay.exchange.models import (
    ExchangeRatio,
    GetWalletsResponse,
    RateEntry,
    TransfersListResponse,
    WithdrawCardOptions,
    WithdrawCryptoOptions,
)
from vardexpay.exchange.responses import (
    CARD_WITHDRAW_ERRORS,
    CRYPTO_WITHDRAW_ERRORS,
    SentinelTable,
    classify_login,
    classify_sentinel,
    decode_body,
    normalize_ratio,
)

logger = get_logger("vardexpay_client")

SESSION_HEADER = "session"


def _email_domain(email: str) -> str:
    return (email or "").rpartition("@")[2] or "<none>"


@dataclass
class Session:
    token: Optional[str] = None
    authenticated: bool = False


class VardexPayClient:
    """Async VardexPay client (auth, wallets, transfers, withdrawals, rates)."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or ClientConfig()
        self.api_url = self.config.api_url
        self.site_url = self.config.site_url
        self.timeout_seconds = float(self.config.timeout_seconds)
        self.session = Session()
        self._transport = transport
        self._main_api: httpx.AsyncClient | None = None
        self._site_api: httpx.AsyncClient | None = None

    @property
    def logged_in(self) -> bool:
        return self.session.authenticated

    async def initialize(self) -> None:
        headers = {"Content-Type": "application/json"}
        if self._main_api is None:
            self._main_api = httpx.AsyncClient(
                timeout=self.timeout_seconds, headers=headers, transport=self._transport
            )
        if self._site_api is None:
            self._site_api = httpx.AsyncClient(
                timeout=self.timeout_seconds, headers=headers, transport=self._transport
            )

    async def close(self) -> None:
        for client in (self._main_api, self._site_api):
            if client is not None:
                await client.aclose()
        self._main_api = None
        self._site_api = None

    async def __aenter__(self) -> VardexPayClient:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _session_headers(self) -> Dict[str, str]:
        if self.session.token:
            return {SESSION_HEADER: self.session.token}
        return {}

    async def _request(
        self,
        method: str,
        url: str,
        *,
        site: bool = False,
        json: Any = None,
    ) -> httpx.Response:
        if self._main_api is None or self._site_api is None:
            await self.initialize()
        client = self._site_api if site else self._main_api
        with log_performance(logger, "VardexPay request", method=method, url=url):
            resp = await client.request(
                method, url, json=json, headers=self._session_headers()
            )
            resp.raise_for_status()
        return resp

    def _require_session(self, operation: str) -> bool:
        if self.session.authenticated:
            return True
        if self.config.strict_auth:
            raise NotAuthenticated()
        logger.warning("VardexPay call skipped, not logged in", operation=operation)
        return False

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> bool:
        resp = await self._request(
            "POST",
            f"{self.api_url}/auth/login",
            json={"email": email, "password": password},
        )
        try:
            token = classify_login(decode_body(resp), resp.headers.get(SESSION_HEADER))
        except VardexPayError as e:
            logger.warning(
                "VardexPay login failed",
                email_domain=_email_domain(email),
                code=e.code.value,
            )
            raise

        self.session = Session(token=token, authenticated=True)
        logger.info("VardexPay login succeeded", email_domain=_email_domain(email))
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_wallets(self) -> Optional[GetWalletsResponse]:
        if not self._require_session("get_wallets"):
            return None
        resp = await self._request("GET", f"{self.api_url}/profile/wallets")
        return resp.json()

    async def transfers_list(self) -> Optional[TransfersListResponse]:
        if not self._require_session("transfers_list"):
            return None
        resp = await self._request("GET", f"{self.api_url}/transfer/list")
        return resp.json()

    async def get_rates(self) -> List[RateEntry]:
        resp = await self._request("GET", f"{self.site_url}/exchange/rates", site=True)
        return resp.json()

    async def get_exchange_ratio(
        self,
        from_currency: str,
        to_currency: str,
        from_network: Optional[str] = None,
        to_network: Optional[str] = None,
    ) -> ExchangeRatio:
        """
        Return ``(rate, scale)`` for a currency pair.

        Unset networks are left out of the request body. The raw upstream
        pair is normalized before it is returned (see ``normalize_ratio``).
        """
        payload = {
            "from": from_currency,
            "fromNetwork": from_network,
            "to": to_currency,
            "toNetwork": to_network,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        resp = await self._request(
            "POST", f"{self.site_url}/exchange/ratio", site=True, json=payload
        )
        raw = decode_body(resp)
        ratio = normalize_ratio(from_currency, raw)
        if list(ratio) != raw:
            logger.debug(
                "VardexPay ratio normalized",
                from_currency=from_currency,
                to_currency=to_currency,
                raw=raw,
                normalized=ratio,
            )
        return ratio

    # ------------------------------------------------------------------
    # Withdrawals
    # ------------------------------------------------------------------

    async def withdraw_card(self, options: WithdrawCardOptions) -> Optional[str]:
        if not self._require_session("withdraw_card"):
            return None
        resp = await self._request("POST", f"{self.api_url}/transfer/card", json=options)
        return self._classify_withdrawal("withdraw_card", decode_body(resp), CARD_WITHDRAW_ERRORS)

    async def withdraw_crypto(self, options: WithdrawCryptoOptions) -> Optional[str]:
        if not self._require_session("withdraw_crypto"):
            return None
        resp = await self._request("POST", f"{self.api_url}/transfer/crypto", json=options)
        return self._classify_withdrawal(
            "withdraw_crypto", decode_body(resp), CRYPTO_WITHDRAW_ERRORS
        )

    @staticmethod
    def _classify_withdrawal(operation: str, body: Any, table: SentinelTable) -> str:
        try:
            result = classify_sentinel(body, table)
        except VardexPayError as e:
            logger.warning(
                "VardexPay withdrawal rejected",
                operation=operation,
                code=e.code.value,
                body=str(body)[:200],
            )
            raise
        logger.info("VardexPay withdrawal accepted", operation=operation)
        return result
