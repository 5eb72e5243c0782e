"""Request executor shared by every Paylike endpoint"""

import json
import time
from functools import lru_cache
from typing import Any, Dict, NoReturn, Optional, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from paylike_client.api.schemas import PaylikeSchema
from paylike_client.domain.exceptions import APIError, DecodeError, TransportError
from paylike_client.infrastructure.observability.logging import log_request, log_response_body
from paylike_client.infrastructure.observability.metrics import record_failure, record_request


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def _json_or_none(raw: bytes) -> Any:
    try:
        return json.loads(raw) if raw.strip() else None
    except ValueError:
        return None


class RequestExecutor:
    """Sends one authenticated request and decodes the response"""

    def __init__(self, http_client: httpx.Client, api_key: str):
        self.http_client = http_client
        # Paylike uses Basic Auth with an empty username and the key as password
        self.auth = httpx.BasicAuth(username="", password=api_key)

    def execute(
        self,
        method: str,
        url: str,
        *,
        body: Union[PaylikeSchema, bytes, None] = None,
        params: Optional[Dict[str, Any]] = None,
        response_type: Any = None,
        envelope: Optional[str] = None,
        route: Optional[str] = None,
    ) -> Any:
        """
        Execute a request and decode its body into response_type.

        With envelope set, the body must be {"<envelope>": {...}} and the
        inner object is returned. Otherwise returns None when response_type
        is None or the body is empty.

        Raises:
            TransportError: No response was received
            APIError: Response status is not 2xx
            DecodeError: Body is not valid JSON, does not match response_type
                or lacks the envelope
        """
        route = route or url
        headers = {"Accept": "application/json"}
        content = None
        if body is not None:
            content = body.to_json() if isinstance(body, PaylikeSchema) else body
            headers["Content-Type"] = "application/json"

        start_time = time.perf_counter()
        try:
            response = self.http_client.request(
                method,
                url,
                content=content,
                params=params,
                headers=headers,
                auth=self.auth,
            )
        except httpx.DecodingError as e:
            # Content-Encoding could not be undone; no usable body
            record_request(method, route, "error", time.perf_counter() - start_time)
            self._decode_failed(method, route, f"Undecodable response body: {e!r}", b"", e)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            duration = time.perf_counter() - start_time
            record_request(method, route, "error", duration)
            record_failure("transport")
            log_request(method, route, None, duration * 1000, "transport_error")
            raise TransportError(f"Paylike request {method} {route} failed: {e!r}", cause=e) from e

        duration = time.perf_counter() - start_time
        raw = response.content
        record_request(method, route, response.status_code, duration)
        log_response_body(route, raw)

        if not response.is_success:
            record_failure("api")
            log_request(method, route, response.status_code, duration * 1000, "api_error")
            raise APIError(response.status_code, _json_or_none(raw), raw)

        log_request(method, route, response.status_code, duration * 1000, "ok")

        if response_type is None:
            return None
        if not raw.strip():
            if envelope is not None:
                self._decode_failed(method, route, f"Expected '{envelope}' envelope but body was empty", raw)
            return None

        expected = Dict[str, response_type] if envelope is not None else response_type
        try:
            decoded = _adapter(expected).validate_json(raw)
        except ValidationError as e:
            self._decode_failed(method, route, f"Invalid response: {e}", raw, e)

        if envelope is None:
            return decoded
        if decoded.get(envelope) is None:
            self._decode_failed(method, route, f"Response envelope has no '{envelope}' key (got {sorted(decoded)})", raw)
        return decoded[envelope]

    @staticmethod
    def _decode_failed(
        method: str, route: str, reason: str, raw: bytes, cause: Optional[BaseException] = None
    ) -> NoReturn:
        record_failure("decode")
        message = f"Paylike {method} {route}: {reason}"
        if cause is not None:
            raise DecodeError(message, raw=raw, cause=cause) from cause
        raise DecodeError(message, raw=raw)
