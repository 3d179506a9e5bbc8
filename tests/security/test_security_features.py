"""
Tests for output sanitisation and content-type checks.
"""

import pytest
from ipintel.security import SecurityValidator


class TestContentType:
    """Test cases for the JSON content-type check."""

    def setup_method(self):
        self.security = SecurityValidator()

    @pytest.mark.parametrize("content_type", [
        "application/json",
        "application/json; charset=utf-8",
        "application/json;charset=UTF-8",
    ])
    def test_json_accepted(self, content_type):
        assert self.security.is_json_content_type(content_type)

    @pytest.mark.parametrize("content_type", [
        None,
        "",
        "text/html",
        "text/plain; charset=utf-8",
        "Application/JSON",
        " application/json",
    ])
    def test_non_json_rejected(self, content_type):
        assert not self.security.is_json_content_type(content_type)


class TestSanitisation:
    """Test cases for output and error message sanitisation."""

    def setup_method(self):
        self.security = SecurityValidator()

    def test_control_characters_escaped(self):
        result = self.security.sanitize_output_text("bad\x1b[31mred")

        assert "\x1b" not in result
        assert "\\x1b" in result

    def test_html_escaped(self):
        assert self.security.sanitize_output_text("<script>") == "&lt;script&gt;"

    def test_truncation(self):
        assert len(self.security.sanitize_output_text("a" * 2000, 100)) == 100

    def test_empty_text(self):
        assert self.security.sanitize_output_text("") == ""

    def test_contact_redacted(self):
        message = "invalid contact test@example.com (test%40example.com)"

        result = self.security.sanitize_error_message(message, "185.94.111.1")

        assert "test@example.com" not in result
        assert "test%40example.com" not in result
        assert "[CONTACT]" in result

    def test_secrets_redacted(self):
        result = self.security.sanitize_error_message("api_key=abcdef1234567890 failed")

        assert "abcdef1234567890" not in result
        assert "[REDACTED]" in result

    def test_internal_ip_redacted_but_target_kept(self):
        message = "192.168.1.10 refused lookup of 10.0.0.5 via 8.8.8.8"

        result = self.security.sanitize_error_message(message, "10.0.0.5")

        assert "192.168.1.10" not in result
        assert "[INTERNAL_IP]" in result
        assert "10.0.0.5" in result
        assert "8.8.8.8" in result

    def test_scores_untouched(self):
        result = self.security.sanitize_error_message("score 0.10.", "185.94.111.1")

        assert result == "score 0.10."

    def test_internal_paths_redacted(self):
        result = self.security.sanitize_error_message("failed in /usr/lib/python3/site-packages/aiohttp/client.py")

        assert "[PATH]" in result
