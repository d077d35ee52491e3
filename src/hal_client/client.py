import json as _json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .core.errors import HalClientError
from .core.observability import log_http_call
from .core.representation import HAL_CONTENT_TYPE, Representation


class HalTransportError(HalClientError):
    """Base error for network and protocol failures."""


class HalHTTPError(HalTransportError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_json = response_json
        self.response_text = response_text


class HalParseError(HalTransportError):
    pass


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2  # total extra attempts
    backoff_base_seconds: float = 0.3  # 0.3, 0.6, 1.2...
    retry_statuses: frozenset[int] = frozenset({502, 503, 504})


class HalClient:
    """
    Synchronous HTTP transport for HAL+JSON resources.
    - GET wraps response bodies as Representations bound to this client
    - POST sends raw or JSON bodies and wraps any HAL response
    - Retries idempotent GETs on transient failures; never retries POST
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout_seconds: float = 10.0,
        retry: Optional[RetryConfig] = None,
        auth: Optional[httpx.Auth] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.log = logger or logging.getLogger("hal_client.client")

        self._owns_http = http is None
        self.http = http or httpx.Client(
            base_url=self.base_url,
            auth=auth,
            headers={
                "Accept": f"{HAL_CONTENT_TYPE}, application/json",
                **(headers or {}),
            },
            timeout=timeout_seconds,
            follow_redirects=True,
        )

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "HalClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str] | httpx.Headers] = None,
    ) -> httpx.Response:
        """
        Core request method.
        - Retries GETs on network/timeouts and configured statuses
        - Raises HalHTTPError on non-2xx HTTP responses
        - Raises HalTransportError on network/timeout errors after retries
        """
        method = method.upper()
        retryable = method == "GET"
        start = time.perf_counter()
        attempt = 0

        while True:
            try:
                resp = self.http.request(method, url, content=content, headers=headers)
            except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout) as exc:
                if retryable and attempt < self.retry.max_retries:
                    self.log.debug(
                        "retrying after network error",
                        extra={"method": method, "url": url, "attempt": attempt},
                    )
                    time.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue
                log_http_call(
                    method, url, status=None, started=start, attempt=attempt, error=exc
                )
                raise HalTransportError(
                    f"Network/timeout error calling {method} {url}: {exc}"
                ) from exc
            except httpx.HTTPError as exc:
                log_http_call(
                    method, url, status=None, started=start, attempt=attempt, error=exc
                )
                raise HalTransportError(
                    f"HTTPX error calling {method} {url}: {exc}"
                ) from exc

            if (
                retryable
                and resp.status_code in self.retry.retry_statuses
                and attempt < self.retry.max_retries
            ):
                self.log.debug(
                    "retrying after status",
                    extra={"url": url, "status": resp.status_code, "attempt": attempt},
                )
                time.sleep(self.retry.backoff_base_seconds * (2**attempt))
                attempt += 1
                continue

            log_http_call(
                method,
                str(resp.request.url),
                status=resp.status_code,
                started=start,
                attempt=attempt,
            )

            if resp.status_code < 200 or resp.status_code >= 300:
                raise self._to_http_error(resp, method=method)
            return resp

    def get(self, url: str) -> Representation:
        resp = self.request("GET", url)
        data = self._safe_json(resp)
        if data is None:
            return Representation(parsed_json={}, href=url, hal_client=self)
        return Representation(parsed_json=data, hal_client=self)

    def post(
        self, url: str, body: Any, headers: Optional[Dict[str, str]] = None
    ) -> Optional[Representation]:
        """
        POST `body` to `url`.
        str/bytes bodies are sent as-is; anything else is JSON encoded.
        Returns the response as a Representation, or None for an empty body.
        """
        if isinstance(body, bytes):
            content = body
        elif isinstance(body, str):
            content = body.encode("utf-8")
        else:
            content = _json.dumps(body).encode("utf-8")

        resp = self.request(
            "POST",
            url,
            content=content,
            headers=self._post_headers(headers),
        )
        data = self._safe_json(resp)
        if data is None:
            return None
        return Representation(parsed_json=data, hal_client=self)

    @staticmethod
    def _post_headers(headers: Optional[Dict[str, str]]) -> httpx.Headers:
        # case-insensitive, so a caller's "content-type" replaces the default
        merged = httpx.Headers({"Content-Type": HAL_CONTENT_TYPE})
        merged.update(headers or {})
        return merged

    def _safe_json(self, resp: httpx.Response) -> Optional[Dict[str, Any]]:
        # 204 No Content and friends
        if not resp.content:
            return None

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise HalParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise HalParseError(
                f"Expected top-level JSON object from "
                f"{resp.request.method} {resp.request.url}, "
                f"got {type(data).__name__}"
            )
        return data

    def _to_http_error(self, resp: httpx.Response, *, method: str) -> HalHTTPError:
        url = str(resp.request.url)
        response_json: Optional[Dict[str, Any]] = None
        response_text: Optional[str] = None
        message = "request failed"

        try:
            parsed = resp.json()
            if isinstance(parsed, dict):
                response_json = parsed
                message = parsed.get("message") or parsed.get("error") or message
        except ValueError:
            response_text = (resp.text or "")[:500]

        return HalHTTPError(
            status_code=resp.status_code,
            method=method,
            url=url,
            message=message,
            response_json=response_json,
            response_text=response_text,
        )

    def __repr__(self) -> str:
        return f"<HalClient base_url={self.base_url or '(none)'}>"


__all__ = [
    "HalClient",
    "RetryConfig",
    "HalTransportError",
    "HalHTTPError",
    "HalParseError",
]
