"""
ipintel - GetIPIntel proxy/VPN/bad-IP detection client.

This package queries the GetIPIntel service for a single IP address and
returns its reputation score, country and echoed query parameters, or a
classified error.
"""

__version__ = "0.1.0"
__author__ = "ipintel"
__license__ = "Apache License 2.0"

from .config import ClientConfig
from .client import IntelClient
from .errors import (
    IntelError,
    TransportError,
    TransportConnectionError,
    RequestTimeoutError,
    IncompleteResponseError,
    HttpStatusError,
    UnexpectedContentTypeError,
    MalformedBodyError,
    ServiceError,
)
