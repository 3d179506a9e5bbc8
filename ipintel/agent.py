"""
Command-line entry point for GetIPIntel lookups.

This module wires the environment configuration, the client and the output
formatting together for one lookup per invocation.
"""

import sys
import json
import asyncio
import argparse
import os
from typing import Dict, Any, Optional
from .client import IntelClient, normalize_ip
from .errors import IntelError, ServiceError
from .security import security
from .validator import InputValidator

BAD_SCORE = 0.99
SUSPICIOUS_SCORE = 0.95


def summarize_intel(intel: Dict[str, Any]) -> Dict[str, Any]:
    """
    Summarize a GetIPIntel response.

    The service returns the probability that an IP is a proxy/VPN/bad IP as a
    string between 0 and 1. Scores of 0.99 and above are treated as bad,
    0.95 and above as suspicious.

    Args:
        intel: Parsed service response

    Returns:
        Dictionary with the score, verdicts and country
    """
    try:
        score = float(intel.get('result', 0))
    except (TypeError, ValueError):
        score = 0.0

    return {
        'ip_address': intel.get('queryIP'),
        'confidence_score': score,
        'is_malicious': score >= BAD_SCORE,
        'is_suspicious': score >= SUSPICIOUS_SCORE,
        'bad_ip': bool(intel.get('BadIP', 0)),
        'country_code': intel.get('Country'),
    }


def run_query(client: IntelClient, ip: str, flags: str = '') -> Dict[str, Any]:
    """Run one lookup to completion on a fresh event loop."""
    return asyncio.run(client.query_intel(ip, flags))


def main(argv: Optional[list] = None):
    """Command-line entry point for the GetIPIntel client."""
    parser = argparse.ArgumentParser(
        description='GetIPIntel proxy/VPN/bad-IP lookup tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Flags (see getipintel.net for details):
  m  - only check the in-house blacklists (fastest)
  b  - check blacklists and dynamic ban lists
  f  - full lookup, forces a fresh score

Environment Variables:
  IPINTEL_CONTACT=you@example.com   - Contact address required by the service
  IPINTEL_HOST                      - Service host (default: check.getipintel.net)
  IPINTEL_PORT                      - Service port; 443 uses HTTPS, others plain HTTP
  IPINTEL_TIMEOUT_MS                - Request timeout in milliseconds (default: 6000)
  IPINTEL_DEBUG=true                - Enable debug mode with diagnostic output
  IPINTEL_DEBUG_LEVEL=basic         - Debug verbosity: basic, detailed, verbose

Examples:
  python -m ipintel.agent 185.94.111.1
  python -m ipintel.agent 185:94:111:1 --flags m
  python -m ipintel.agent 185.94.111.1 --json
"""
    )

    parser.add_argument('ip', help='IP address to look up (dotted, or separated by ":" or "-")')
    parser.add_argument('--flags', default='', help='GetIPIntel query flags (e.g. m, b, f)')
    parser.add_argument('--contact', help='Contact e-mail address sent with the query')
    parser.add_argument('--port', type=int, help='Service port (443 = HTTPS)')
    parser.add_argument('--timeout-ms', type=int, help='Request timeout in milliseconds')
    parser.add_argument('--json', action='store_true', help='Print the raw service response as JSON')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode with low-level diagnostic output')
    parser.add_argument('--debug-level', choices=['basic', 'detailed', 'verbose'], default='basic',
                        help='Debug verbosity level (default: basic)')

    args = parser.parse_args(argv)

    if args.debug:
        os.environ['IPINTEL_DEBUG'] = 'true'
        os.environ['IPINTEL_DEBUG_LEVEL'] = args.debug_level

    validator = InputValidator()
    target = normalize_ip(args.ip)

    if args.contact is not None and not validator.is_valid_contact(args.contact):
        print(f"Error: invalid contact address: {security.sanitize_output_text(args.contact, 100)}")
        sys.exit(1)

    if validator.is_valid_ip(target) and not validator.is_public_ip(target):
        print(f"Warning: {target} is not a public IP address")

    client = IntelClient.from_environment(
        contact=args.contact,
        port=args.port,
        timeout_ms=args.timeout_ms,
    )

    try:
        intel = run_query(client, args.ip, args.flags)
    except ServiceError as e:
        print(f"Service error: {security.sanitize_error_message(e.raw_body, target)}")
        sys.exit(1)
    except IntelError as e:
        print(f"Error: {security.sanitize_error_message(str(e), target)}")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(intel, indent=2))
        return

    print(f"Intel for {target}:")
    for key, value in intel.items():
        print(f"  {key}: {security.sanitize_output_text(str(value), 200)}")

    summary = summarize_intel(intel)
    print("  Summary:")
    print(f"    Score: {summary['confidence_score']:.4f}")
    print(f"    Malicious: {summary['is_malicious']}")
    print(f"    Suspicious: {summary['is_suspicious']}")
    if summary['country_code']:
        print(f"    Country: {summary['country_code']}")


if __name__ == "__main__":
    main()
