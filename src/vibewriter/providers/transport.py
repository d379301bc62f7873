"""Synchronous JSON-over-HTTP transport to the LLM vendor.

Only connection failures and timeouts are retried; every requests
exception surfaces as AIConnectionError. A vendor that answers
with an error status has already decided; its answer is reported as an
AIConnectionError carrying the status code and the vendor's error object.
"""

from __future__ import annotations

import json
from typing import Any

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from vibewriter.core.constants import ERROR_BODY_PREVIEW_CHARS
from vibewriter.core.exceptions import AIConnectionError, AIResponseError
from vibewriter.core.logging import get_logger


logger = get_logger(__name__)

_RETRYABLE = (requests.ConnectionError, requests.Timeout)


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "Retrying provider request",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


def describe_error_response(status_code: int, body: str) -> str:
    """Build the error message for a non-2xx response.

    Args:
        status_code: HTTP status returned by the vendor.
        body: Raw response body.

    Returns:
        "API returned status code: N - <error json>" when the body holds an
        ``error`` object, otherwise the start of the raw body.
    """
    message = f"API returned status code: {status_code}"
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return f"{message} - {json.dumps(data['error'])}"
    return f"{message} - Response: {body[:ERROR_BODY_PREVIEW_CHARS]}"


class HttpTransport:
    """Posts JSON payloads and returns decoded JSON responses.

    Attributes:
        timeout_seconds: Per-request timeout.
        max_retries: Retries after a connection failure or timeout.
        backoff_seconds: Base of the exponential wait between attempts.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 60.0,
        max_retries: int = 1,
        backoff_seconds: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._session = session or requests.Session()

    def _post(self, endpoint: str, headers: dict[str, str], body: bytes) -> requests.Response:
        retrying = Retrying(
            retry=retry_if_exception_type(_RETRYABLE),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=10),
            before_sleep=_log_retry,
            reraise=True,
        )
        return retrying(
            self._session.post,
            endpoint,
            data=body,
            headers=headers,
            timeout=self.timeout_seconds,
        )

    def send(
        self,
        endpoint: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """Send one request.

        Args:
            endpoint: Vendor URL.
            headers: Request headers including authentication.
            payload: JSON request body.

        Returns:
            The decoded JSON response object.

        Raises:
            AIConnectionError: If the vendor cannot be reached or answers
                with a non-2xx status.
            AIResponseError: If the body is not a JSON object.
        """
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        messages = payload.get("messages") or []
        logger.info(
            "Sending provider request",
            payload_bytes=len(body),
            model=payload.get("model", "unknown"),
            tools=len(payload.get("tools") or []),
            messages=len(messages),
            last_role=messages[-1].get("role", "unknown") if messages else None,
        )

        try:
            response = self._post(endpoint, headers, body)
        except requests.RequestException as exc:
            raise AIConnectionError(
                f"Failed to connect to AI provider: {exc}",
                details={"endpoint": endpoint},
            ) from exc

        if not 200 <= response.status_code < 300:
            logger.error(
                "Provider request failed",
                status_code=response.status_code,
                payload_preview=body[:1000].decode("utf-8", errors="replace"),
            )
            raise AIConnectionError(
                describe_error_response(response.status_code, response.text),
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise AIResponseError("Invalid JSON response from API") from exc
        if not isinstance(result, dict) or not result:
            raise AIResponseError("Invalid JSON response from API")

        logger.info(
            "Provider response received",
            stop_reason=result.get("stop_reason"),
            finish_reason=_finish_reason(result),
            content_blocks=len(result.get("content") or []),
        )
        return result


def _finish_reason(result: dict[str, Any]) -> str | None:
    choices = result.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0].get("finish_reason")
    return None


__all__ = [
    "HttpTransport",
    "describe_error_response",
]
