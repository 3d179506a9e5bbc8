"""
HTTP transports for GetIPIntel requests.

A transport performs exactly one HTTP exchange and returns the raw response,
or raises a TransportError. The plain and encrypted variants share one
implementation and differ only in URL scheme and TLS setting.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

import aiohttp
from yarl import URL

from .config import SECURE_PORT
from .debug import debug_logger
from .errors import IncompleteResponseError, RequestTimeoutError, TransportConnectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestSpec:
    """One outbound request.

    Attributes:
        host: Target hostname.
        port: Target port.
        path: Path and query string, already encoded.
        headers: Request headers.
        method: HTTP method.
    """

    host: str
    port: int
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    method: str = 'GET'


@dataclass(frozen=True)
class RawResponse:
    """The response to one request, before any validation.

    Header names are lower-cased. Truncated responses raise instead of being
    returned, so complete is always True.
    """

    status_code: int
    headers: Dict[str, str]
    body: str
    complete: bool = True


class TransportInvoker(ABC):
    """Performs a single HTTP request over some channel."""

    @abstractmethod
    async def invoke(self, request_spec: RequestSpec, timeout_ms: int) -> RawResponse:
        """
        Perform the request described by request_spec.

        Args:
            request_spec: Request to send
            timeout_ms: Time allowed for the whole exchange, in milliseconds

        Returns:
            The complete response

        Raises:
            RequestTimeoutError: The exchange did not finish in time
            IncompleteResponseError: The body was truncated
            TransportConnectionError: The connection could not be used
        """
        pass


class AiohttpTransport(TransportInvoker):
    """Transport backed by an aiohttp session per request.

    Subclasses choose the channel by setting scheme and ssl.
    """

    scheme: str
    ssl: bool

    def build_url(self, request_spec: RequestSpec) -> URL:
        """Build the request URL; the path is sent without re-encoding."""
        return URL(f"{self.scheme}://{request_spec.host}:{request_spec.port}{request_spec.path}", encoded=True)

    async def invoke(self, request_spec: RequestSpec, timeout_ms: int) -> RawResponse:
        url = self.build_url(request_spec)
        # One timer for the whole exchange; expiry aborts the in-flight request
        timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000.0)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(
                    request_spec.method,
                    url,
                    headers=dict(request_spec.headers),
                    ssl=self.ssl,
                    allow_redirects=False,
                ) as response:
                    chunks: List[bytes] = []
                    async for chunk in response.content.iter_any():
                        chunks.append(chunk)
                    headers = {name.lower(): value for name, value in response.headers.items()}
                    body = self._decode(b''.join(chunks), response.charset)
                    status_code = response.status
        except asyncio.TimeoutError as e:
            logger.debug(f"Request to {request_spec.host} timed out after {timeout_ms} ms")
            raise RequestTimeoutError(timeout_ms) from e
        except aiohttp.ClientPayloadError as e:
            logger.debug(f"Truncated response from {request_spec.host}: {e}")
            raise IncompleteResponseError(e) from e
        except (aiohttp.ClientError, OSError) as e:
            logger.debug(f"Connection to {request_spec.host}:{request_spec.port} failed: {e}")
            raise TransportConnectionError(e) from e

        debug_logger.log_exchange(request_spec.method, str(url), status_code, len(body))
        return RawResponse(status_code=status_code, headers=headers, body=body, complete=True)

    def _decode(self, payload: bytes, charset) -> str:
        try:
            return payload.decode(charset or 'utf-8', errors='replace')
        except LookupError:
            return payload.decode('utf-8', errors='replace')


class PlainTransport(AiohttpTransport):
    """Unencrypted HTTP transport."""

    scheme = 'http'
    ssl = False


class SecureTransport(AiohttpTransport):
    """HTTPS transport with certificate verification."""

    scheme = 'https'
    ssl = True


def select_transport(port: int) -> TransportInvoker:
    """Return the transport for a port: HTTPS on 443, plain HTTP otherwise."""
    if port == SECURE_PORT:
        return SecureTransport()
    return PlainTransport()
