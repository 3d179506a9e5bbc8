"""pytest fixtures for testing."""

import asyncio
import json

import pytest

from ipintel.config import config
from ipintel.transport import RawResponse, TransportInvoker


SUCCESS_BODY = json.dumps({
    "status": "success",
    "result": "0.99",
    "queryIP": "185.94.111.1",
    "queryFlags": "",
    "queryOFlags": "coflags=b",
    "queryFormat": "json",
    "contact": "test@example.com",
    "BadIP": 1,
    "Country": "RU",
})


class FakeTransport(TransportInvoker):
    """Deterministic transport that records requests and replays one outcome."""

    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response
        self.error = error
        self.delay = delay
        self.requests = []

    async def invoke(self, request_spec, timeout_ms):
        self.requests.append((request_spec, timeout_ms))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def make_response(status_code=200, body=SUCCESS_BODY, content_type='application/json'):
    headers = {}
    if content_type is not None:
        headers['content-type'] = content_type
    return RawResponse(status_code=status_code, headers=headers, body=body, complete=True)


def raw_http_response(status_code=200, body=SUCCESS_BODY, content_type='application/json',
                      content_length=None):
    """Serialize an HTTP/1.1 response; content_length may lie to simulate truncation."""
    payload = body.encode('utf-8')
    length = len(payload) if content_length is None else content_length
    head = (
        f"HTTP/1.1 {status_code} Status\r\n"
        f"Content-Type: {content_type}\r\n"
        f"Content-Length: {length}\r\n"
        f"Connection: close\r\n"
        f"\r\n"
    )
    return head.encode('ascii') + payload


async def start_raw_server(reply, delay=0.0, captured=None):
    """
    Start a local server that answers every connection with raw bytes.

    Args:
        reply: Bytes to write after the request headers are read, or None to
            close the connection without answering
        delay: Seconds to wait before replying
        captured: Optional list receiving the raw request head of each connection

    Returns:
        (server, port)
    """
    async def handler(reader, writer):
        try:
            head = await reader.readuntil(b'\r\n\r\n')
            if captured is not None:
                captured.append(head.decode('latin-1'))
            if delay:
                await asyncio.sleep(delay)
            if reply is not None:
                writer.write(reply)
                await writer.drain()
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handler, '127.0.0.1', 0)
    port = server.sockets[0].getsockname()[1]
    return server, port


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def response_factory():
    """Factory for RawResponse instances."""
    return make_response


@pytest.fixture
def local_server():
    """Helpers for raw local HTTP servers."""
    return start_raw_server, raw_http_response


@pytest.fixture(autouse=True)
def clean_config_cache():
    """Cached configuration values must not leak between tests."""
    config.clear_cache()
    yield
    config.clear_cache()
