"""
Tests for environment variable validation.

Each test manipulates ``os.environ`` via the ``clean_env`` fixture to ensure
isolation between test cases.
"""


import pytest

from mikrod_gateway.env_validation import ValidationResult, validate_environment


# ---------------------------------------------------------------------------
# Fixture: ensure a clean environment for every test
# ---------------------------------------------------------------------------

# All env vars the validation module inspects; removed before each test so
# the host machine's environment doesn't leak in.
_ENV_VARS_UNDER_TEST = (
    "MIKROD_SKIP_ENV_VALIDATION",
    "OPENROUTER_API_KEY",
    "KNOWLEDGE_BASE_PATH",
    "MIKROD_API_BASE",
    "MIKROD_CORS_ORIGINS",
    "MIKROD_CORS_CREDENTIALS",
    "OTEL_ENABLED",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove all env vars under test before each test case."""
    for var in _ENV_VARS_UNDER_TEST:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Skip validation
# ---------------------------------------------------------------------------


class TestSkipValidation:
    """Tests for MIKROD_SKIP_ENV_VALIDATION behaviour."""

    def test_skip_returns_empty_result(self, monkeypatch):
        monkeypatch.setenv("MIKROD_SKIP_ENV_VALIDATION", "true")
        result = validate_environment()
        assert result.errors == []
        assert result.warnings == []

    def test_skip_ignores_bad_config(self, monkeypatch):
        """Even blatant errors are ignored when skip is on."""
        monkeypatch.setenv("MIKROD_SKIP_ENV_VALIDATION", "yes")
        monkeypatch.setenv("KNOWLEDGE_BASE_PATH", "/nonexistent/knowledge.json")
        monkeypatch.setenv("PORT", "not-a-port")
        result = validate_environment()
        assert result.errors == []
        assert result.warnings == []


# ---------------------------------------------------------------------------
# Valid configuration
# ---------------------------------------------------------------------------


class TestValidConfiguration:
    """A fully-valid configuration should produce zero errors and warnings."""

    def test_minimal_valid_config(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real-key")
        result = validate_environment()
        assert isinstance(result, ValidationResult)
        assert result.errors == []
        assert result.warnings == []

    def test_full_valid_config(self, monkeypatch, tmp_path):
        kb = tmp_path / "knowledge.json"
        kb.write_text("{}")

        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real-key")
        monkeypatch.setenv("KNOWLEDGE_BASE_PATH", str(kb))
        monkeypatch.setenv("MIKROD_API_BASE", "https://openrouter.ai/api/v1")
        monkeypatch.setenv("MIKROD_CORS_ORIGINS", "https://mikrodtech.example")
        monkeypatch.setenv("MIKROD_CORS_CREDENTIALS", "true")
        monkeypatch.setenv("OTEL_ENABLED", "false")
        monkeypatch.setenv("PORT", "3000")

        result = validate_environment()
        assert result.errors == []
        assert result.warnings == []


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


class TestApiKey:
    def test_missing_key_warns(self):
        result = validate_environment()
        assert result.errors == []
        assert any("OPENROUTER_API_KEY" in w for w in result.warnings)


class TestKnowledgeBasePath:
    def test_missing_file_is_error(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real-key")
        monkeypatch.setenv("KNOWLEDGE_BASE_PATH", "/nonexistent/knowledge.json")
        result = validate_environment()
        assert len(result.errors) == 1
        assert "/nonexistent/knowledge.json" in result.errors[0]


class TestApiBase:
    def test_bad_scheme_warns(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real-key")
        monkeypatch.setenv("MIKROD_API_BASE", "openrouter.ai/api/v1")
        result = validate_environment()
        assert any("MIKROD_API_BASE" in w for w in result.warnings)


class TestCors:
    def test_credentials_with_wildcard_warns(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real-key")
        monkeypatch.setenv("MIKROD_CORS_CREDENTIALS", "true")
        result = validate_environment()
        assert any("wildcard" in w for w in result.warnings)


class TestTypedVars:
    def test_bad_boolean_warns(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real-key")
        monkeypatch.setenv("OTEL_ENABLED", "maybe")
        result = validate_environment()
        assert any("OTEL_ENABLED" in w for w in result.warnings)

    @pytest.mark.parametrize("value", ["abc", "0", "70000"])
    def test_bad_port_warns(self, monkeypatch, value):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-real-key")
        monkeypatch.setenv("PORT", value)
        result = validate_environment()
        assert len(result.warnings) == 1
        assert "PORT" in result.warnings[0]

    def test_never_raises(self, monkeypatch):
        monkeypatch.setenv("PORT", "")
        monkeypatch.setenv("OTEL_ENABLED", "")
        validate_environment()
