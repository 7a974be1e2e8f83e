"""Tests for error sanitization utilities."""

from __future__ import annotations

from environment_operator.utils.errors import sanitize_dict, sanitize_error_message, sanitize_exception


class TestSanitizeErrorMessage:
    def test_bearer_token(self):
        """Test bearer token redaction."""
        result = sanitize_error_message("Authorization: Bearer abc.def-123")
        assert "abc.def-123" not in result
        assert "[REDACTED]" in result

    def test_token_field(self):
        """Test token field redaction."""
        result = sanitize_error_message("invalid token: s3cr3t")
        assert "s3cr3t" not in result

    def test_password(self):
        """Test password redaction."""
        result = sanitize_error_message("login failed password=hunter2, retrying")
        assert "hunter2" not in result
        assert "retrying" in result

    def test_plain_message_untouched(self):
        """Test a message without secrets."""
        message = "the secret 'dev-secret' referenced by the Environment resource was not found"
        assert sanitize_error_message(message) == message


def test_sanitize_exception():
    """Test exception sanitization."""
    assert "topsecret" not in sanitize_exception(ValueError("token=topsecret"))


class TestSanitizeDict:
    def test_redacts_sensitive_keys(self):
        """Test redaction of sensitive keys."""
        result = sanitize_dict({"token": "x", "name": "env"})
        assert result == {"token": "[REDACTED]", "name": "env"}

    def test_nested(self):
        """Test nested dictionaries."""
        result = sanitize_dict({"outer": {"kubeconfig": "apiVersion: v1"}})
        assert result["outer"]["kubeconfig"] == "[REDACTED]"

    def test_extra_keys(self):
        """Test caller-provided sensitive keys."""
        result = sanitize_dict({"apiURL": "https://a"}, sensitive_keys={"apiurl"})
        assert result["apiURL"] == "[REDACTED]"

    def test_non_string_values_kept(self):
        """Test that non-string values are kept."""
        assert sanitize_dict({"allowInsecureSkipTLSVerify": True}) == {"allowInsecureSkipTLSVerify": True}
