"""
Client for an optional external token minting service.

When ``TOKEN_MINT_ENDPOINT`` is configured, newly created vehicles that
arrive without a ``tokenId`` are posted to it as
``{"vin", "metadata", "ownerAddress"}``.  A successful response carries
``{"txid", "tokenId"}``.  Minting is best effort: every failure is
returned as a message that ends up in the vehicle's ``onchainError``
field, and the vehicle is stored regardless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)


@dataclass
class MintResult:
    """Outcome of a mint attempt.

    Attributes:
        token_id: Token reference returned by the service, if any.
        txid: Transaction reference returned by the service, if any.
        error: Human readable failure reason; ``None`` on success.
    """

    token_id: Optional[str] = None
    txid: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MintClient:
    """Thin wrapper around ``requests`` for the mint endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def mint(self, vin: str, metadata: Dict[str, Any], owner_address: str) -> MintResult:
        payload = {"vin": vin, "metadata": metadata, "ownerAddress": owner_address}
        try:
            resp = self.session.post(
                self.endpoint, json=payload, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.error("Failed to call mint endpoint for VIN %s: %s", vin, exc)
            return MintResult(error=str(exc))

        if not resp.ok:
            logger.warning("Mint endpoint returned error %s: %s", resp.status_code, resp.text[:200])
            return MintResult(error=f"Mint endpoint error {resp.status_code}")

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        token_id = body.get("tokenId") or body.get("token")
        txid = body.get("txid") or body.get("tx")
        if not (token_id or txid):
            return MintResult(error="Mint endpoint did not return txid/tokenId")
        logger.info("Minted token %s (tx %s) for VIN %s", token_id, txid, vin)
        return MintResult(token_id=token_id, txid=txid)
