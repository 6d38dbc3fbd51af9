"""Remote completion client for the Anthropic Messages endpoint.

``CompletionClient.complete`` never raises: transport failures, non-2xx
statuses and odd response bodies all come back as reply text so the caller
can append them to the transcript like any other assistant turn.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from chattool.config_loader import DEFAULT_CONFIG
from chattool.schemas import MessagesRequest, MessagesResponse, WireMessage
from chattool.transcript import Transcript

logger = logging.getLogger(__name__)

API_URL = DEFAULT_CONFIG["api"]["url"]
API_VERSION = DEFAULT_CONFIG["api"]["version"]
MODEL = DEFAULT_CONFIG["api"]["model"]
MAX_TOKENS = DEFAULT_CONFIG["api"]["max_tokens"]

NO_TEXT_PLACEHOLDER = "(no text returned)"


@dataclass
class RequestContext:
    """Per-call controls. ``timeout`` of None keeps the transport default."""

    timeout: Optional[float] = None
    cancel_event: Optional[threading.Event] = None

    @property
    def cancelled(self) -> bool:
        return bool(self.cancel_event and self.cancel_event.is_set())


class CompletionClient:
    def __init__(
        self,
        api_key: str,
        url: str = API_URL,
        model: str = MODEL,
        max_tokens: int = MAX_TOKENS,
        api_version: str = API_VERSION,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.max_tokens = max_tokens
        self.api_version = api_version
        self.timeout = timeout

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], api_key: str) -> "CompletionClient":
        api = cfg.get("api", {}) or {}
        return cls(
            api_key,
            url=api.get("url") or API_URL,
            model=api.get("model") or MODEL,
            max_tokens=int(api.get("max_tokens") or MAX_TOKENS),
            api_version=str(api.get("version") or API_VERSION),
            timeout=api.get("timeout"),
        )

    def headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
            "Accept": "application/json",
        }

    def build_request(self, transcript: Transcript) -> MessagesRequest:
        return MessagesRequest(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[WireMessage(**m) for m in transcript.to_wire()],
        )

    def complete(self, transcript: Transcript, context: Optional[RequestContext] = None) -> str:
        context = context or RequestContext(timeout=self.timeout)
        if context.cancelled:
            logger.info("api_call_cancelled messages=%d", len(transcript))
            return "[ERROR] Request cancelled"
        payload = self.build_request(transcript).model_dump()
        logger.info("api_call_start model=%s messages=%d", self.model, len(transcript))
        try:
            resp = requests.post(self.url, headers=self.headers(), json=payload, timeout=context.timeout)
        except requests.RequestException as e:
            logger.warning("api_call_failed error=%s", e)
            return f"[ERROR] Request failed: {e}"
        status = resp.status_code
        body = resp.text or ""
        if not 200 <= status < 300:
            logger.warning("api_call_end status=%d body_len=%d", status, len(body))
            return f"[ERROR] Status {status} {resp.reason}\n{body}"
        text = extract_reply_text(resp)
        logger.info("api_call_end status=%d reply_len=%d", status, len(text))
        return text


def extract_reply_text(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        logger.warning("api_reply_not_json")
        return NO_TEXT_PLACEHOLDER
    try:
        parsed = MessagesResponse.model_validate(data)
    except ValidationError as e:
        logger.warning("api_reply_shape_unexpected errors=%d", e.error_count())
        return NO_TEXT_PLACEHOLDER
    text = parsed.first_text()
    if text is None:
        return NO_TEXT_PLACEHOLDER
    return text
