"""
Input validation utilities.

This module provides validation for target IP addresses and contact
addresses. The client core passes input through untouched; these checks are
used by the configuration layer and the command line.
"""

import ipaddress
import re


class InputValidator:
    """Validator for IP addresses and contact e-mail addresses."""

    _contact_pattern = re.compile(r'^[^@\s]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+$')

    def is_valid_ip(self, ip_string: str) -> bool:
        """
        Validate if a string represents a valid IP address.

        Args:
            ip_string: String representation of an IP address

        Returns:
            True if valid IPv4 or IPv6 address, False otherwise
        """
        try:
            ipaddress.ip_address(ip_string.strip())
            return True
        except ValueError:
            return False

    def is_public_ip(self, ip_string: str) -> bool:
        """
        Check if IP address is in public address space.

        Args:
            ip_string: String representation of an IP address

        Returns:
            True if public IP address, False otherwise

        Raises:
            ValueError: If IP address is invalid
        """
        try:
            ip_obj = ipaddress.ip_address(ip_string.strip())
            return not ip_obj.is_private and not ip_obj.is_loopback and not ip_obj.is_reserved
        except ValueError as e:
            raise ValueError(f"Invalid IP address: {ip_string}") from e

    def is_valid_contact(self, contact: str) -> bool:
        """
        Check that a contact address looks like an e-mail address.

        GetIPIntel rejects queries without a reachable contact address, so
        only the overall shape is checked here.

        Args:
            contact: Contact address

        Returns:
            True if the address has a local part and a dotted domain
        """
        if not contact or len(contact) > 254:
            return False
        return bool(self._contact_pattern.match(contact.strip()))
