"""Tests for deployment configuration loading and validation."""

import pytest

from hasura_deploy.config import (
    ACCESS_TOKEN_ENV,
    DEFAULT_API_URL,
    DEFAULT_CLOUD,
    DEFAULT_CONSOLE_URL_TEMPLATE,
    DEFAULT_REGION,
    DeployConfig,
    load_config,
)
from hasura_deploy.exceptions import ConfigurationError, MissingCredentialError


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_from_environment(self):
        config = load_config(environ={ACCESS_TOKEN_ENV: "pat-123"})

        assert config.access_token == "pat-123"
        assert config.api_url == DEFAULT_API_URL
        assert config.cloud == DEFAULT_CLOUD
        assert config.region == DEFAULT_REGION
        assert config.console_url_template == DEFAULT_CONSOLE_URL_TEMPLATE

    def test_missing_token(self):
        with pytest.raises(MissingCredentialError, match=ACCESS_TOKEN_ENV):
            load_config(environ={})

    def test_blank_token(self):
        with pytest.raises(MissingCredentialError):
            load_config(environ={ACCESS_TOKEN_ENV: "   "})

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv(ACCESS_TOKEN_ENV, "from-os-env")
        monkeypatch.delenv("HASURA_CLOUD_API_URL", raising=False)

        assert load_config().access_token == "from-os-env"

    def test_load_yaml_file(self, tmp_path):
        config_file = tmp_path / "hasura.yaml"
        config_file.write_text("""
cloud: "gcp"
region: "us-central1"
timeout: 10
console_url_template: "https://console.example.com/{project_id}"
""")

        config = load_config(str(config_file), environ={ACCESS_TOKEN_ENV: "pat"})
        assert config.cloud == "gcp"
        assert config.region == "us-central1"
        assert config.timeout == 10.0
        assert config.console_url_template == "https://console.example.com/{project_id}"

    def test_substitutes_env_vars(self, tmp_path):
        config_file = tmp_path / "hasura.yaml"
        config_file.write_text('region: "${HASURA_REGION}"\ncloud: "${HASURA_CLOUD:-aws}"\n')

        config = load_config(
            str(config_file),
            environ={ACCESS_TOKEN_ENV: "pat", "HASURA_REGION": "eu-west-1"},
        )
        assert config.region == "eu-west-1"
        assert config.cloud == "aws"

    def test_missing_substitution_variable(self, tmp_path):
        config_file = tmp_path / "hasura.yaml"
        config_file.write_text('region: "${UNSET_REGION_VAR}"\n')

        with pytest.raises(ConfigurationError, match="UNSET_REGION_VAR"):
            load_config(str(config_file), environ={ACCESS_TOKEN_ENV: "pat"})

    def test_api_url_env_overrides_file(self, tmp_path):
        config_file = tmp_path / "hasura.yaml"
        config_file.write_text('api_url: "https://file.example.com/v1/graphql"\n')

        config = load_config(
            str(config_file),
            environ={
                ACCESS_TOKEN_ENV: "pat",
                "HASURA_CLOUD_API_URL": "https://env.example.com/v1/graphql",
            },
        )
        assert config.api_url == "https://env.example.com/v1/graphql"

    def test_empty_file_uses_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        config = load_config(str(config_file), environ={ACCESS_TOKEN_ENV: "pat"})
        assert config.region == DEFAULT_REGION

    def test_missing_file(self):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config("/nonexistent/path.yaml", environ={ACCESS_TOKEN_ENV: "pat"})

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(config_file), environ={ACCESS_TOKEN_ENV: "pat"})

    def test_non_mapping_yaml(self, tmp_path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(str(config_file), environ={ACCESS_TOKEN_ENV: "pat"})

    def test_non_numeric_timeout(self, tmp_path):
        config_file = tmp_path / "hasura.yaml"
        config_file.write_text('timeout: "soon"\n')

        with pytest.raises(ConfigurationError, match="timeout"):
            load_config(str(config_file), environ={ACCESS_TOKEN_ENV: "pat"})


class TestDeployConfigValidate:
    """Tests for DeployConfig.validate."""

    def test_valid(self):
        DeployConfig(access_token="pat").validate()  # Should not raise

    def test_bad_api_url(self):
        with pytest.raises(ConfigurationError, match="api_url"):
            DeployConfig(access_token="pat", api_url="ftp://example.com").validate()

    def test_bad_timeout(self):
        with pytest.raises(ConfigurationError, match="timeout"):
            DeployConfig(access_token="pat", timeout=0).validate()

    def test_template_without_placeholder(self):
        with pytest.raises(ConfigurationError, match="project_id"):
            DeployConfig(
                access_token="pat", console_url_template="https://console.example.com"
            ).validate()

    def test_template_with_unknown_placeholder(self):
        with pytest.raises(ConfigurationError, match="only use"):
            DeployConfig(
                access_token="pat",
                console_url_template="https://c.example/{project_id}/{region}",
            ).validate()

    def test_template_with_positional_placeholder(self):
        with pytest.raises(ConfigurationError, match="only use"):
            DeployConfig(
                access_token="pat", console_url_template="https://c.example/{project_id}/{}"
            ).validate()

    def test_repr_hides_token(self):
        assert "pat-secret" not in repr(DeployConfig(access_token="pat-secret"))
