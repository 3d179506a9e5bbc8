"""
Debug utilities for ipintel.

This module provides debugging output for lookups, transport exchanges and
other low-level diagnostics when debug mode is enabled.
"""

import sys
import time
import json
from typing import Any, Callable, Dict, List, Optional
from functools import wraps
from .config import config

LEVELS = {'basic': 0, 'detailed': 1, 'verbose': 2}
MAX_VALUE_CHARS = 100


class DebugLogger:
    """Debug logger for low-level diagnostics."""

    def __init__(self):
        """Initialize debug logger."""
        self.start_time = time.time()
        self.query_count = 0

    def enabled_for(self, level: str) -> bool:
        """True when debug mode is on and its level includes messages of this level."""
        if not config.is_debug_mode():
            return False
        current = LEVELS.get(config.get_debug_level(), 0)
        return LEVELS.get(level, 0) <= current

    def log(self, level: str, message: str, data: Optional[Dict[str, Any]] = None):
        """
        Print a timestamped diagnostic line to stderr.

        Args:
            level: Level of the message ('basic', 'detailed', 'verbose')
            message: Message text
            data: Extra values, shown from 'detailed' upwards
        """
        if not self.enabled_for(level):
            return

        elapsed = time.time() - self.start_time
        lines = [f"[DEBUG +{elapsed:.3f}s] {message}"]
        if data and self.enabled_for('detailed'):
            lines.extend(f"[DEBUG]   {line}" for line in self._data_lines(data))
        print("\n".join(lines), file=sys.stderr)

    def _data_lines(self, data: Dict[str, Any]) -> List[str]:
        """Render extra values: full JSON when verbose, one short line per key otherwise."""
        if self.enabled_for('verbose'):
            return json.dumps(data, indent=2, default=str).splitlines()
        return [f"{key}: {self._describe(value)}" for key, value in data.items()]

    def _describe(self, value: Any) -> str:
        if isinstance(value, (dict, list)):
            return f"<{type(value).__name__} of {len(value)}>"
        text = str(value)
        if len(text) > MAX_VALUE_CHARS:
            return text[:MAX_VALUE_CHARS - 3] + '...'
        return text

    def log_query_call(self, owner: str, method: str, args: tuple = (), kwargs: Dict[str, Any] = None):
        """Log the start of a lookup."""
        self.query_count += 1
        kwargs = kwargs or {}

        call_args = ", ".join(filter(None, [
            ", ".join(repr(arg) for arg in args),
            ", ".join(f"{k}={v!r}" for k, v in kwargs.items()),
        ]))

        self.log('basic', f"Query #{self.query_count}: {owner}.{method}({call_args})")

    def log_query_result(self, owner: str, method: str, result: Any, execution_time: float):
        """Log a successful lookup."""
        result_summary = self._summarize_result(result)

        self.log('basic', f"Query result: {owner}.{method} -> {result_summary} ({execution_time:.3f}s)")

        self.log('detailed', f"Full result data for {owner}.{method}:", {'result': result})

    def log_query_error(self, owner: str, method: str, error: Exception, execution_time: float):
        """Log a failed lookup."""
        error_type = type(error).__name__
        error_msg = str(error)[:100]

        self.log('basic', f"Query error: {owner}.{method} -> {error_type}: {error_msg} ({execution_time:.3f}s)")

    def log_exchange(self, method: str, url: str, status_code: int, body_length: int):
        """Log one completed HTTP exchange."""
        self.log('detailed', f"{method} {url} -> {status_code} ({body_length} bytes)")

    def _summarize_result(self, result: Any) -> str:
        """Create a summary of the result for logging."""
        if result is None:
            return "None"
        elif isinstance(result, dict):
            return f"dict({len(result)} keys)"
        elif isinstance(result, list):
            return f"list({len(result)} items)"
        elif isinstance(result, str):
            return f"str({len(result)} chars)"
        else:
            return f"{type(result).__name__}({result})"

    def log_config_info(self, client_config):
        """Log the client configuration in debug mode."""
        if not config.is_debug_mode():
            return

        debug_info = {
            'debug_level': config.get_debug_level(),
            'host': client_config.host,
            'port': client_config.port,
            'secure': client_config.is_secure,
            'timeout_ms': client_config.timeout_ms,
        }

        self.log('detailed', "Current configuration:", debug_info)


def debug_query_method(func: Callable) -> Callable:
    """
    Decorator to add debug logging to coroutine methods.

    Calls, result summaries and errors are logged with timing when debug
    mode is enabled. Errors are re-raised unchanged.
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        if not config.is_debug_mode():
            return await func(self, *args, **kwargs)

        owner = self.__class__.__name__
        method_name = func.__name__

        debug_logger.log_query_call(owner, method_name, args, kwargs)

        start_time = time.time()
        try:
            result = await func(self, *args, **kwargs)
            execution_time = time.time() - start_time
            debug_logger.log_query_result(owner, method_name, result, execution_time)
            return result
        except Exception as e:
            execution_time = time.time() - start_time
            debug_logger.log_query_error(owner, method_name, e, execution_time)
            raise

    return wrapper


# Global debug logger instance
debug_logger = DebugLogger()
