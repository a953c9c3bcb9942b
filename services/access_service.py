"""
Access Service Module

This module performs HTTP GET requests against the upstream API while
tolerating blocked or failing network paths. Requests go direct first; once
direct access fails it is switched off for the session and requests are routed
through an ordered list of relays, starting from the relay that last worked.

The learned state lives in an AccessState object owned by the caller, so
independent fetchers can hold independent state and concurrent requests made
through one fetcher share what it has learned.
"""

import json
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union
from urllib.parse import urlparse

import requests

from config import settings
from services.cascade import Attempt, first_success
from services.protocols import HttpSession
from services.request_builder import wrap_with_relay
from utils.exceptions import (
    AllStrategiesExhausted, HttpStatusError, MalformedResponse, TransportError
)
from utils.logger import get_logger

logger = get_logger(__name__)

DIRECT = "direct"


@dataclass
class AccessState:
    """Session-wide memory of which access strategy to try first.

    Attributes:
        direct_enabled (bool): False once a direct request has failed.
        relay_index (int): Index of the relay that last succeeded.
    """
    direct_enabled: bool = True
    relay_index: int = 0

    def disable_direct(self) -> None:
        self.direct_enabled = False

    def relay_order(self, relay_count: int) -> List[int]:
        """Relay indices starting at the last working relay, wrapping around."""
        if relay_count <= 0:
            return []
        start = self.relay_index % relay_count
        return [(start + offset) % relay_count for offset in range(relay_count)]

    def reset(self, prefer_direct: bool = True) -> None:
        self.direct_enabled = prefer_direct
        self.relay_index = 0


# =============================================================================
# Relay Envelopes
# =============================================================================

@dataclass(frozen=True)
class DirectEnvelope:
    """A relay response that is the upstream payload itself."""
    payload: Any


@dataclass(frozen=True)
class WrappedEnvelope:
    """A relay response carrying the upstream payload as a JSON string in ``contents``."""
    contents: Optional[str]


RawEnvelope = Union[DirectEnvelope, WrappedEnvelope]


def classify_envelope(payload: Any) -> RawEnvelope:
    """Tell a wrapped relay envelope apart from a raw upstream payload."""
    if isinstance(payload, dict) and "contents" in payload and "data" not in payload:
        return WrappedEnvelope(payload.get("contents"))
    return DirectEnvelope(payload)


def unwrap_envelope(envelope: RawEnvelope) -> Any:
    """
    Extract the upstream payload from a relay envelope.

    Raises:
        MalformedResponse: If a wrapped envelope holds no valid JSON document.
    """
    if isinstance(envelope, DirectEnvelope):
        return envelope.payload

    if not isinstance(envelope.contents, str) or not envelope.contents:
        raise MalformedResponse("Relay envelope has no contents")
    try:
        return json.loads(envelope.contents)
    except ValueError as e:
        raise MalformedResponse(f"Relay envelope contents are not valid JSON: {e}") from e


# =============================================================================
# Access Strategy Cascade
# =============================================================================

class AccessStrategyCascade:
    """Executes GET requests through direct access, then through relays."""

    def __init__(
        self,
        session: Optional[HttpSession] = None,
        state: Optional[AccessState] = None,
        relays: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the cascade.

        Args:
            session: HTTP session used for every attempt (defaults to a new requests.Session).
            state: Shared access state (defaults to a fresh state honouring PREFER_DIRECT_ACCESS).
            relays: Ordered relay prefixes (defaults to settings.CORS_PROXIES).
            timeout: Seconds per attempt (defaults to settings.REQUEST_TIMEOUT).
            headers: Request headers (defaults to settings.REQUEST_HEADERS).
        """
        self.session = session or requests.Session()
        self.state = state or AccessState(direct_enabled=settings.PREFER_DIRECT_ACCESS)
        self.relays = list(settings.CORS_PROXIES if relays is None else relays)
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.headers = dict(settings.REQUEST_HEADERS if headers is None else headers)

    def get_json(self, target_url: str) -> Any:
        """
        Fetch a URL and return its decoded JSON payload.

        Args:
            target_url: Fully-qualified upstream URL.

        Returns:
            The decoded upstream payload (relay envelopes already unwrapped).

        Raises:
            AllStrategiesExhausted: If direct access and every relay failed.
        """
        outcome = first_success(self._attempts(target_url), on_failure=self._record_failure)
        if outcome.ok:
            logger.debug(f"Fetched {target_url} via {outcome.name}")
            return outcome.value

        last_error = outcome.last_error
        reason = str(last_error) if last_error else "no access strategies available"
        raise AllStrategiesExhausted(
            f"All upstream requests failed. Last error: {reason}",
            last_error=last_error
        )

    def _attempts(self, target_url: str) -> Iterator[Attempt]:
        # Lazy, so the relay order reflects what the direct attempt just learned
        if self.state.direct_enabled:
            yield Attempt(DIRECT, partial(self._request_direct, target_url))

        for index in self.state.relay_order(len(self.relays)):
            name = f"relay {index + 1}/{len(self.relays)} ({self.relays[index]})"
            yield Attempt(name, partial(self._request_via_relay, index, target_url))

    def _record_failure(self, attempt: Attempt, error: Exception) -> None:
        if attempt.name == DIRECT:
            logger.warning(f"Direct request failed, trying relays: {error}")
            self.state.disable_direct()
        else:
            logger.warning(f"{attempt.name.capitalize()} failed: {error}")

    def _request_direct(self, target_url: str) -> Any:
        return self._request(target_url)

    def _request_via_relay(self, index: int, target_url: str) -> Any:
        relay = self.relays[index]
        logger.info(f"Trying relay {index + 1}/{len(self.relays)}: {relay}")

        payload = self._request(wrap_with_relay(relay, target_url))
        result = unwrap_envelope(classify_envelope(payload))

        self.state.relay_index = index
        return result

    def _request(self, url: str) -> Any:
        """
        Issue one GET request and decode the JSON body.

        Raises:
            TransportError: On connection failures and timeouts.
            HttpStatusError: On non-2xx responses.
            MalformedResponse: If the body is not JSON.
        """
        host = urlparse(url).netloc or url
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to {host} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise HttpStatusError(f"HTTP {response.status_code} from {host}", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"Response from {host} is not valid JSON") from e
