"""
Configuration management for ipintel.

This module reads connection parameters and diagnostic switches from the
environment and turns them into an immutable ClientConfig.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .validator import InputValidator

# Set up logging for configuration events
logger = logging.getLogger(__name__)

DEFAULT_HOST = 'check.getipintel.net'
DEFAULT_PORT = 443
DEFAULT_CONTACT = 'anonymous@anonymous.com'
DEFAULT_TIMEOUT_MS = 6000

SECURE_PORT = 443


@dataclass(frozen=True)
class ClientConfig:
    """Connection parameters for one GetIPIntel client.

    Attributes:
        host: Service hostname.
        port: Service port. 443 selects the encrypted transport.
        contact: Contact e-mail required by the service.
        timeout_ms: Per-request timeout in milliseconds.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    contact: str = DEFAULT_CONTACT
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def is_secure(self) -> bool:
        """True when the configured port selects the encrypted transport."""
        return self.port == SECURE_PORT


class SecureConfig:
    """Environment-backed configuration manager."""

    def __init__(self):
        """Initialize configuration manager."""
        self._config_cache: Dict[str, Any] = {}
        self._validator = InputValidator()
        # Values that identify the operator are never cached
        self._sensitive_keys = {'contact', 'api_key', 'token', 'secret'}

    def get_config_value(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value with caching.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if key in self._config_cache:
            return self._config_cache[key]

        env_key = f"IPINTEL_{key.upper()}"
        value = os.getenv(env_key, default)

        # Cache non-sensitive values
        if not any(sensitive in key.lower() for sensitive in self._sensitive_keys):
            self._config_cache[key] = value

        return value

    def clear_cache(self):
        """Forget cached values so the next lookup re-reads the environment."""
        self._config_cache.clear()

    def get_host(self) -> str:
        """
        Get the service hostname.

        Returns:
            Hostname from IPINTEL_HOST or the public GetIPIntel host
        """
        host = os.getenv('IPINTEL_HOST', '').strip()
        return host or DEFAULT_HOST

    def get_port(self) -> int:
        """
        Get the service port.

        Returns:
            Port from IPINTEL_PORT, or 443 when unset or invalid
        """
        raw = os.getenv('IPINTEL_PORT')
        if raw is None or not raw.strip():
            return DEFAULT_PORT
        try:
            port = int(raw)
        except ValueError:
            logger.warning(f"Invalid IPINTEL_PORT value {raw!r}, using {DEFAULT_PORT}")
            return DEFAULT_PORT
        if not 1 <= port <= 65535:
            logger.warning(f"IPINTEL_PORT {port} out of range, using {DEFAULT_PORT}")
            return DEFAULT_PORT
        return port

    def get_contact(self) -> str:
        """
        Get the contact e-mail address sent with every query.

        Returns:
            Contact address, or the anonymous default when unset or invalid
        """
        for env_var in self._get_contact_env_names():
            contact = os.getenv(env_var)
            if not contact:
                continue
            contact = contact.strip()
            if self._validator.is_valid_contact(contact):
                logger.info(f"Contact address loaded (via {env_var})")
                return contact
            logger.warning(f"Invalid contact address format in {env_var}")

        logger.debug("No contact address configured, using anonymous default")
        return DEFAULT_CONTACT

    def _get_contact_env_names(self) -> list:
        """Environment variable names checked for the contact address, in order."""
        return ['IPINTEL_CONTACT', 'GETIPINTEL_CONTACT']

    def get_timeout_ms(self, default: int = DEFAULT_TIMEOUT_MS) -> int:
        """
        Get request timeout with bounds.

        Args:
            default: Default timeout in milliseconds

        Returns:
            Timeout bounded to 100-60000 ms
        """
        try:
            timeout = int(self.get_config_value('timeout_ms', default))
            return max(100, min(60000, timeout))
        except (ValueError, TypeError):
            return default

    def client_config(self, **overrides) -> ClientConfig:
        """
        Build a ClientConfig from the environment.

        Args:
            **overrides: Values that take precedence over the environment
                (host, port, contact, timeout_ms). None values are ignored.

        Returns:
            Immutable client configuration
        """
        values = {
            'host': self.get_host(),
            'port': self.get_port(),
            'contact': self.get_contact(),
            'timeout_ms': self.get_timeout_ms(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ClientConfig(**values)

    def is_debug_mode(self) -> bool:
        """
        Check if debug mode is enabled.

        Returns:
            True if debug mode is enabled
        """
        debug_value = os.getenv('IPINTEL_DEBUG', 'false').lower()
        return debug_value in ('true', '1', 'yes', 'on')

    def get_debug_level(self) -> str:
        """
        Get debug level for controlling verbosity.

        Returns:
            Debug level: 'basic', 'detailed', or 'verbose'
        """
        if not self.is_debug_mode():
            return 'off'

        level = os.getenv('IPINTEL_DEBUG_LEVEL', 'basic').lower()
        if level in ('basic', 'detailed', 'verbose'):
            return level
        return 'basic'


# Global configuration instance
config = SecureConfig()
