from __future__ import annotations
"""
Transports for remote move providers.

The rest of the code should not care which SDK is in use. A transport takes a
TransportRequest built from a ProviderDescriptor and returns the HTTP status
plus the decoded JSON envelope; it raises TransportError only when no HTTP
response was obtained at all (connection failure, timeout).

- OpenAIChatTransport: chat completions through the openai SDK (configurable base_url).
- HttpTransport: plain JSON POST through httpx, used for Gemini's native REST API.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import httpx
import openai
from openai import AsyncOpenAI

log = logging.getLogger("llm_client")


class TransportError(Exception):
    """No HTTP response was obtained (network error, timeout)."""


@dataclass(frozen=True)
class TransportRequest:
    endpoint: str
    credential: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_s: float = 60.0


@dataclass(frozen=True)
class TransportResponse:
    status: int
    payload: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    async def send(self, request: TransportRequest) -> TransportResponse:
        ...


class HttpTransport:
    """POST the body as JSON and hand back whatever came back, success or not."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    async def send(self, request: TransportRequest) -> TransportResponse:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=request.timeout_s) as client:
                rsp = await client.post(request.endpoint, headers=request.headers, json=request.body)
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        try:
            payload = rsp.json()
        except ValueError:
            payload = None
        log.debug("POST %s -> %d", request.endpoint, rsp.status_code)
        return TransportResponse(status=rsp.status_code, payload=payload, text=rsp.text)


class OpenAIChatTransport:
    """Chat completions via the openai SDK; SDK retries are disabled, the gateway owns retry policy."""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._http_client = http_client

    async def send(self, request: TransportRequest) -> TransportResponse:
        client = AsyncOpenAI(
            api_key=request.credential,
            base_url=request.endpoint,
            timeout=request.timeout_s,
            max_retries=0,
            default_headers=request.headers or None,
            http_client=self._http_client,
        )
        try:
            rsp = await client.chat.completions.create(**request.body)
        except openai.APIStatusError as e:
            return TransportResponse(status=e.status_code, payload=e.body, text=e.response.text)
        except openai.APIConnectionError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        except openai.APIResponseValidationError as e:
            return TransportResponse(status=e.status_code, payload=None, text=e.response.text)
        finally:
            if self._http_client is None:
                await client.close()
        log.debug("chat.completions %s -> 200", request.endpoint)
        return TransportResponse(status=200, payload=rsp.model_dump(), text=rsp.model_dump_json())


def default_transports() -> Dict[str, Transport]:
    """Transport per descriptor family."""
    return {"openai": OpenAIChatTransport(), "gemini": HttpTransport()}
