"""
Tests for core/exceptions and core/runtime
"""

import pytest

from scriptwriter.core import (
    BackendError,
    ComponentGenerationError,
    ConfigurationError,
    InvalidRequestError,
    InvalidTransitionError,
    MISSING_CREDENTIAL_MESSAGE,
    PipelineBusyError,
    PipelineError,
    ScriptAssemblyError,
    ScriptwriterError,
    UpstreamServiceError,
    ensure_generation_configured,
    is_generation_configured,
    parse_bool_env,
)


class TestExceptionStatusCodes:
    @pytest.mark.parametrize("exc_type,status", [
        (ScriptwriterError, 500),
        (ConfigurationError, 500),
        (InvalidRequestError, 400),
        (UpstreamServiceError, 502),
        (ComponentGenerationError, 502),
        (ScriptAssemblyError, 502),
    ])
    def test_status_code(self, exc_type, status):
        error = exc_type("message")

        assert error.status_code == status
        assert error.message == "message"
        assert str(error) == "message"

    def test_stage_errors_are_upstream_errors(self):
        assert issubclass(ComponentGenerationError, UpstreamServiceError)
        assert issubclass(ScriptAssemblyError, UpstreamServiceError)

    def test_pipeline_errors_share_a_base(self):
        for exc_type in (InvalidTransitionError, PipelineBusyError, BackendError):
            assert issubclass(exc_type, PipelineError)
            assert issubclass(exc_type, ScriptwriterError)

    def test_backend_error_keeps_http_status(self):
        assert BackendError("bad gateway", 502).status_code == 502
        assert BackendError("unreachable").status_code == 500


class TestParseBoolEnv:
    @pytest.mark.parametrize("value", ["1", "true", "TRUE", " yes ", "on"])
    def test_truthy(self, value):
        assert parse_bool_env(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
    def test_falsy(self, value):
        assert parse_bool_env(value, default=True) is False

    def test_missing_uses_default(self):
        assert parse_bool_env(None, default=True) is True
        assert parse_bool_env(None) is False


class TestCredentialGuard:
    def test_configured(self):
        assert is_generation_configured() is True
        assert ensure_generation_configured() == "mock-key"

    def test_missing_credential(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY")

        assert is_generation_configured() is False
        with pytest.raises(ConfigurationError, match=MISSING_CREDENTIAL_MESSAGE):
            ensure_generation_configured()

    def test_blank_credential_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "   ")

        assert is_generation_configured() is False
