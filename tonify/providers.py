# tonify/providers.py
from __future__ import annotations

"""
Chat-completions providers used by the tone relay.

The relay issues exactly one completion per request: providers here do not
retry or fall back. Any transport error, HTTP error status or unexpected
response shape is raised as UpstreamError so the relay never forwards the
upstream body to its callers.
"""

from typing import Any, Dict, Optional

import requests

from .errors import UpstreamError
from .logger import get_logger
from .settings import Settings

logger = get_logger("providers")


# ------------------------ Chat provider base ------------------------
class BaseChatProvider:
    name: str

    def __init__(self, name: str) -> None:
        self.name = name

    def _extract_text(self, resp_json: Dict[str, Any]) -> str:
        try:
            content = resp_json["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError(f"{self.name}: malformed completion response") from e
        return (content or "").strip()

    def chat(self, payload: Dict[str, Any]) -> str:
        raise NotImplementedError


# ------------------------ OpenAI-compatible provider ------------------------
class OpenAIProvider(BaseChatProvider):
    """Works against OpenAI or any endpoint speaking /chat/completions."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        org: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__("openai")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.org = org
        self.timeout = timeout

    def chat(self, payload: Dict[str, Any]) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.org:
            headers["OpenAI-Organization"] = self.org

        try:
            resp = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.Timeout as e:
            raise UpstreamError(f"{self.name}: request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise UpstreamError(f"{self.name}: request failed: {e}") from e

        if resp.status_code >= 400:
            # Body stays server-side; callers only see the normalized error
            logger.warning("%s returned HTTP %s: %s", self.name, resp.status_code, resp.text[:500])
            raise UpstreamError(f"{self.name}: HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError(f"{self.name}: response is not JSON") from e
        return self._extract_text(body)


def provider_from_settings(settings: Settings) -> BaseChatProvider:
    return OpenAIProvider(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        org=settings.OPENAI_ORG,
        timeout=settings.UPSTREAM_TIMEOUT_S,
    )
