"""
GetIPIntel lookup client.

IntelClient builds the check.php query for one IP address, sends it over the
transport selected by the configured port and validates the answer.
"""

import json
import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from . import __version__
from .config import ClientConfig, config
from .debug import debug_logger, debug_query_method
from .errors import (
    HttpStatusError,
    MalformedBodyError,
    ServiceError,
    TransportError,
    UnexpectedContentTypeError,
)
from .security import security
from .transport import RawResponse, RequestSpec, TransportInvoker, select_transport

logger = logging.getLogger(__name__)

USER_AGENT = f"ipintel/{__version__}"
OUTPUT_FORMAT = 'json'
OUTPUT_FLAGS = 'coflags=b'

_SEPARATORS = re.compile(r'[:-]')


def normalize_ip(ip: str) -> str:
    """Replace ':' and '-' separators with '.', e.g. '185:94:111:1' -> '185.94.111.1'."""
    return _SEPARATORS.sub('.', ip)


def build_request_path(ip: str, contact: str, flags: str = '') -> str:
    """
    Build the check.php path and query string.

    Args:
        ip: Normalized IP address
        contact: Contact e-mail, URL-encoded here
        flags: Query flags, passed through as given

    Returns:
        Encoded path with query string
    """
    return (
        f"/check.php?ip={ip}"
        f"&contact={quote(contact, safe='')}"
        f"&format={OUTPUT_FORMAT}"
        f"&oflags={OUTPUT_FLAGS}"
        f"&flags={flags}"
    )


class IntelClient:
    """Client session for the GetIPIntel API."""

    def __init__(self, client_config: Optional[ClientConfig] = None,
                 transport: Optional[TransportInvoker] = None):
        """
        Initialize the client.

        Args:
            client_config: Connection parameters; defaults to ClientConfig()
            transport: Transport to use; chosen from the configured port when omitted
        """
        self.config = client_config or ClientConfig()
        self.transport = transport or select_transport(self.config.port)
        # Last HTTP status, or the transport error when no status was obtained.
        # Diagnostic only: concurrent calls overwrite each other.
        self.last_status_code: Any = None

    @classmethod
    def from_environment(cls, transport: Optional[TransportInvoker] = None, **overrides) -> 'IntelClient':
        """Create a client from IPINTEL_* environment variables and explicit overrides."""
        client_config = config.client_config(**overrides)
        debug_logger.log_config_info(client_config)
        return cls(client_config, transport)

    def build_request(self, ip: str, flags: str = '') -> RequestSpec:
        """Build the request for one lookup."""
        path = build_request_path(normalize_ip(ip), self.config.contact, flags or '')
        headers = {
            'cache-control': 'no-cache',
            'user-agent': USER_AGENT,
            'connection': 'keep-alive',
        }
        return RequestSpec(host=self.config.host, port=self.config.port, path=path, headers=headers)

    @debug_query_method
    async def query_intel(self, ip: str, flags: str = '') -> Dict[str, Any]:
        """
        Look up one IP address.

        Args:
            ip: IP address, dotted or with ':' / '-' separators
            flags: GetIPIntel flags such as 'm', 'b' or 'f'

        Returns:
            The parsed service response; 'status' is always 'success'

        Raises:
            ValueError: If ip is empty
            TransportError: The HTTP exchange failed
            HttpStatusError: The service answered with a status other than 200
            UnexpectedContentTypeError: The response is not JSON
            MalformedBodyError: The body is not valid JSON
            ServiceError: The service reported a failure
        """
        if not ip:
            raise ValueError("An IP address is required")

        request_spec = self.build_request(ip, flags)
        logger.debug(f"Querying {self.config.host}:{self.config.port} for {normalize_ip(ip)}")

        try:
            response = await self.transport.invoke(request_spec, self.config.timeout_ms)
        except TransportError as e:
            self.last_status_code = e
            raise

        self.last_status_code = response.status_code
        return self.parse_response(response)

    def parse_response(self, response: RawResponse) -> Dict[str, Any]:
        """
        Validate a raw response and return the parsed intel.

        Args:
            response: Response returned by the transport

        Returns:
            Parsed JSON object

        Raises:
            HttpStatusError, UnexpectedContentTypeError, MalformedBodyError, ServiceError
        """
        if response.status_code != 200:
            raise HttpStatusError(response.status_code, response.body)

        content_type = response.headers.get('content-type')
        if not security.is_json_content_type(content_type):
            raise UnexpectedContentTypeError(content_type)

        try:
            intel = json.loads(response.body)
        except ValueError as e:
            raise MalformedBodyError(e, response.body) from e

        if not isinstance(intel, dict) or intel.get('status') != 'success':
            raise ServiceError(response.body)

        return intel
