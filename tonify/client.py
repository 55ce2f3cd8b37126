# tonify/client.py
from __future__ import annotations

"""
HTTP client for the tone relay, used by the demo UI and the conversation
tracker.

Failures map onto the shared taxonomy:
  - relay unreachable            -> NetworkError ("tone unavailable")
  - timeout, 5xx, unusable body  -> UpstreamError
  - 4xx                          -> BadRequest
"""

import asyncio
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from .errors import BadRequest, NetworkError, UpstreamError
from .schemas import RewriteResult, ToneResult
from .settings import client_settings


class ToneClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or client_settings.RELAY_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else client_settings.CLIENT_TIMEOUT_S
        self.session = session or requests.Session()

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = self.session.post(f"{self.base_url}{path}", json=body, timeout=self.timeout)
        except requests.Timeout as e:
            raise UpstreamError(f"relay did not answer within {self.timeout}s") from e
        except requests.RequestException as e:
            raise NetworkError(f"relay unreachable: {e}") from e

        # surface server-provided JSON error if present
        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.ok:
            message = data.get("error") if isinstance(data, dict) else None
            message = message or f"HTTP {resp.status_code}"
            if 400 <= resp.status_code < 500:
                raise BadRequest(message)
            raise UpstreamError(message)

        if not isinstance(data, dict):
            raise UpstreamError("relay returned a non-JSON body")
        return data

    def health(self) -> bool:
        try:
            r = self.session.get(f"{self.base_url}/healthz", timeout=self.timeout)
        except requests.RequestException:
            return False
        return r.ok

    def classify_tone(self, message: str) -> ToneResult:
        data = self._post("/api/classifyTone", {"message": message})
        try:
            return ToneResult.model_validate(data)
        except ValidationError as e:
            raise UpstreamError("relay returned a malformed tone result") from e

    def rewrite_tone(self, message: str, target_tone: str) -> RewriteResult:
        data = self._post("/api/rewriteTone", {"message": message, "targetTone": target_tone})
        try:
            return RewriteResult.model_validate(data)
        except ValidationError as e:
            raise UpstreamError("relay returned no usable suggestions") from e

    # asyncio-friendly variants: requests blocks, so run it off the event loop
    async def aclassify_tone(self, message: str) -> ToneResult:
        return await asyncio.to_thread(self.classify_tone, message)

    async def arewrite_tone(self, message: str, target_tone: str) -> RewriteResult:
        return await asyncio.to_thread(self.rewrite_tone, message, target_tone)
