"""
Security utilities for ipintel.

This module provides output sanitisation for service responses and error
messages, and the content-type check applied to every response.
"""

import re
import html
import ipaddress
from typing import Optional

JSON_MEDIA_TYPE = 'application/json'


class SecurityValidator:
    """Security validation utilities."""

    def __init__(self):
        """Initialize security validator."""
        self._secret_patterns = [
            r'[Aa]pi[_\s-]*[Kk]ey[:\s=]+[\w\-]{8,}',
            r'[Tt]oken[:\s=]+[\w\-]{8,}',
            r'[Aa]uthorization[:\s=]+[\w\-]{8,}',
            r'Bearer\s+[\w\-]{8,}',
        ]
        self._email_pattern = re.compile(r'[\w.+-]+(?:@|%40)[\w-]+(?:\.[\w-]+)+')
        self._ipv4_pattern = re.compile(r'\b\d{1,3}(?:\.\d{1,3}){3}\b')

    def is_json_content_type(self, content_type: Optional[str]) -> bool:
        """
        Check whether a Content-Type header announces JSON.

        The match is a case-sensitive prefix match, so parameters such as
        "; charset=utf-8" are accepted.

        Args:
            content_type: Content-Type header value, None when absent

        Returns:
            True if the response may be parsed as JSON
        """
        if not content_type:
            return False
        return content_type.startswith(JSON_MEDIA_TYPE)

    def sanitize_output_text(self, text: str, max_length: int = 1000) -> str:
        """
        Sanitize text for safe output (prevent injection attacks).

        Args:
            text: Text to sanitize
            max_length: Maximum allowed length

        Returns:
            Sanitized text
        """
        if not text:
            return ""

        text = str(text)[:max_length]

        # HTML escape to prevent XSS-like attacks in logs
        text = html.escape(text, quote=True)

        # Keep only printable characters and common whitespace
        sanitized = ""
        for char in text:
            if char.isprintable() or char in {' ', '\t', '\n'}:
                sanitized += char
            else:
                sanitized += f"\\x{ord(char):02x}"

        return sanitized

    def sanitize_error_message(self, error_msg: str, target: str = '') -> str:
        """
        Sanitize error messages to prevent information disclosure.

        Secrets, contact addresses and internal paths are redacted. The
        queried IP address is left as is.

        Args:
            error_msg: Original error message
            target: IP address being processed

        Returns:
            Sanitized error message safe for logging
        """
        sanitized = str(error_msg)

        for pattern in self._secret_patterns:
            sanitized = re.sub(pattern, '[REDACTED]', sanitized)

        sanitized = self._email_pattern.sub('[CONTACT]', sanitized)

        # Remove internal paths
        sanitized = re.sub(r'/[a-zA-Z0-9/_\-\.]+\.py', '[PATH]', sanitized)

        # Remove internal IP addresses (but keep the target)
        def _redact_internal(match):
            address = match.group(0)
            if address == target:
                return address
            try:
                if ipaddress.ip_address(address).is_private:
                    return '[INTERNAL_IP]'
            except ValueError:
                pass
            return address

        sanitized = self._ipv4_pattern.sub(_redact_internal, sanitized)

        return self.sanitize_output_text(sanitized, 500)


# Global security validator instance
security = SecurityValidator()
