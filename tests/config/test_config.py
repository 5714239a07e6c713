import pytest

from business_central.config import BC_BASE_URL
from config.config import (
    DEFAULT_API_PATH,
    expand_env_vars,
    load_api_path,
    load_auth_config,
    load_client_config,
    load_settings,
    load_yaml,
)

BC_ENV_VARS = [
    "BC_TENANT_ID",
    "BC_ENVIRONMENT",
    "BC_COMPANY_ID",
    "BC_BASE_URL",
    "BC_TIMEOUT_SECONDS",
    "BC_USER_AGENT",
    "BC_CLIENT_ID",
    "BC_CLIENT_SECRET",
    "BC_AUTH_TENANT_ID",
    "BC_API_PATH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in BC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path, tenant_id, company_id, client_id):
    path = tmp_path / "config.yaml"
    path.write_text(
        "business_central:\n"
        f"  tenant_id: {tenant_id}\n"
        "  environment: Sandbox\n"
        f"  company_id: {company_id}\n"
        "  api_path: contoso/app1/v1.0\n"
        "  timeout_seconds: 45\n"
        "auth:\n"
        f"  client_id: {client_id}\n"
        "  client_secret: ${TEST_BC_SECRET:-from-default}\n"
    )
    return path


# =========================================================================
# load_yaml / expand_env_vars
# =========================================================================


class TestLoadYaml:
    def test_returns_empty_dict_for_nonexistent_file(self, tmp_path):
        assert load_yaml(tmp_path / "missing.yaml") == {}

    def test_loads_yaml_file(self, tmp_path):
        config_file = tmp_path / "test.yaml"
        config_file.write_text("key: value\nnested:\n  a: 1\n")
        assert load_yaml(config_file) == {"key": "value", "nested": {"a": 1}}

    def test_empty_file_is_empty_dict(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_yaml(config_file) == {}


class TestExpandEnvVars:
    def test_expands_set_variable(self, monkeypatch):
        monkeypatch.setenv("TEST_BC_VAR", "hello")
        assert expand_env_vars("${TEST_BC_VAR}") == "hello"

    def test_uses_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("TEST_BC_VAR", raising=False)
        assert expand_env_vars("${TEST_BC_VAR:-fallback}") == "fallback"

    def test_leaves_unset_variable_without_default(self, monkeypatch):
        monkeypatch.delenv("TEST_BC_VAR", raising=False)
        assert expand_env_vars("${TEST_BC_VAR}") == "${TEST_BC_VAR}"

    def test_recurses_into_dicts_and_lists(self, monkeypatch):
        monkeypatch.setenv("TEST_BC_VAR", "x")
        data = {"a": ["${TEST_BC_VAR}", 1], "b": {"c": "pre-${TEST_BC_VAR}"}}
        assert expand_env_vars(data) == {"a": ["x", 1], "b": {"c": "pre-x"}}


# =========================================================================
# load_client_config
# =========================================================================


class TestLoadClientConfig:
    def test_loads_from_file(self, config_file, tenant_id, company_id):
        config = load_client_config(config_file)

        assert config.tenant_id == tenant_id
        assert config.environment == "Sandbox"
        assert config.company_id == company_id
        assert config.timeout_seconds == 45.0
        assert config.base_url == BC_BASE_URL

    def test_env_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("BC_ENVIRONMENT", "Production")
        monkeypatch.setenv("BC_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("BC_BASE_URL", "http://localhost:8080/v2.0/")

        config = load_client_config(config_file)

        assert config.environment == "Production"
        assert config.timeout_seconds == 12.5
        assert config.base_url == "http://localhost:8080/v2.0"

    def test_env_only(self, tmp_path, monkeypatch, tenant_id, company_id):
        empty = tmp_path / "empty.yaml"
        empty.write_text("{}\n")
        monkeypatch.setenv("BC_TENANT_ID", tenant_id)
        monkeypatch.setenv("BC_ENVIRONMENT", "Production")
        monkeypatch.setenv("BC_COMPANY_ID", company_id)

        config = load_client_config(empty)
        assert config.company_id == company_id
        assert config.timeout_seconds == 30.0

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("business_central:\n  tenant_id: nope\n")
        with pytest.raises(ValueError, match="GUID"):
            load_client_config(path)

    def test_explicit_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_client_config(tmp_path / "missing.yaml")

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("business_central: [1, 2]\n")
        with pytest.raises(ValueError, match="mapping"):
            load_client_config(path)


# =========================================================================
# load_auth_config / load_api_path / load_settings
# =========================================================================


class TestLoadAuthConfig:
    def test_expands_secret_default(self, config_file, client_id):
        auth = load_auth_config(config_file)
        assert auth.client_id == client_id
        assert auth.client_secret == "from-default"
        assert auth.tenant_id is None

    def test_secret_from_env(self, config_file, monkeypatch):
        monkeypatch.setenv("BC_CLIENT_SECRET", "env-secret")
        assert load_auth_config(config_file).client_secret == "env-secret"

    def test_secret_not_in_repr(self, config_file):
        assert "from-default" not in repr(load_auth_config(config_file))


class TestLoadSettings:
    def test_api_path_from_file(self, config_file):
        assert load_api_path(config_file) == "contoso/app1/v1.0"

    def test_api_path_default(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("business_central: {}\n")
        assert load_api_path(path) == DEFAULT_API_PATH

    def test_load_settings(self, config_file, company_id):
        settings = load_settings(config_file)
        assert settings.client.company_id == company_id
        assert settings.auth.client_secret == "from-default"
        assert settings.api_path == "contoso/app1/v1.0"
