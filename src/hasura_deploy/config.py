"""Configuration loading and validation for Hasura Cloud deployment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .exceptions import ConfigurationError, MissingCredentialError


ACCESS_TOKEN_ENV = "HASURA_CLOUD_ACCESS_TOKEN"
API_URL_ENV = "HASURA_CLOUD_API_URL"

DEFAULT_API_URL = "https://data.pro.hasura.io/v1/graphql"
DEFAULT_CLOUD = "aws"
DEFAULT_REGION = "us-west-1"
DEFAULT_CONSOLE_URL_TEMPLATE = "https://cloud.hasura.io/project/{project_id}/console"
DEFAULT_TIMEOUT = 30.0

# Pattern to match ${VAR_NAME} or ${VAR_NAME:-default}
ENV_VAR_PATTERN = re.compile(r'\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}')


@dataclass
class DeployConfig:
    """Complete deployment configuration."""

    access_token: str
    api_url: str = DEFAULT_API_URL
    cloud: str = DEFAULT_CLOUD
    region: str = DEFAULT_REGION
    console_url_template: str = DEFAULT_CONSOLE_URL_TEMPLATE
    timeout: float = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"DeployConfig(api_url={self.api_url!r}, cloud={self.cloud!r}, "
            f"region={self.region!r}, timeout={self.timeout!r})"
        )

    def validate(self) -> None:
        """Validate the configuration before any request is made."""
        if not self.access_token:
            raise MissingCredentialError(ACCESS_TOKEN_ENV)

        if not self.api_url.startswith(("https://", "http://")):
            raise ConfigurationError(
                f"api_url must be an http(s) URL, got '{self.api_url}'"
            )

        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

        if "{project_id}" not in self.console_url_template:
            raise ConfigurationError(
                "console_url_template must contain a '{project_id}' placeholder"
            )
        try:
            self.console_url_template.format(project_id="x")
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(
                f"console_url_template can only use the '{{project_id}}' placeholder: {e!r}"
            )


def _substitute_env_vars(value: Any, environ: Mapping[str, str]) -> Any:
    """
    Recursively substitute environment variables in configuration values.

    Supports patterns:
        ${VAR_NAME} - Required variable, raises error if not set
        ${VAR_NAME:-default} - Optional variable with default value
    """
    if isinstance(value, str):
        def replace_match(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2)
            env_value = environ.get(var_name)

            if env_value is not None:
                return env_value
            elif default is not None:
                return default
            else:
                raise ConfigurationError(
                    f"Environment variable '{var_name}' is not set and has no default. "
                    f"Set it with: export {var_name}=<value>"
                )

        return ENV_VAR_PATTERN.sub(replace_match, value)

    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v, environ) for k, v in value.items()}

    elif isinstance(value, list):
        return [_substitute_env_vars(item, environ) for item in value]

    else:
        return value


def _read_config_file(config_path: str, environ: Mapping[str, str]) -> dict:
    config_file = Path(config_path)
    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file) as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(f"Configuration in {config_path} must be a mapping")

    return _substitute_env_vars(raw_data, environ)


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DeployConfig:
    """
    Build the deployment configuration.

    The access token always comes from the environment. Other settings come
    from the optional YAML file, where ${VAR_NAME} or ${VAR_NAME:-default}
    patterns are substituted, and ``HASURA_CLOUD_API_URL`` overrides the
    file's ``api_url``.

    Args:
        config_path: Optional path to a YAML configuration file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated DeployConfig object
    """
    env = os.environ if environ is None else environ
    data = _read_config_file(config_path, env) if config_path else {}

    try:
        timeout = float(data.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError):
        raise ConfigurationError(f"timeout must be a number, got {data.get('timeout')!r}")

    config = DeployConfig(
        access_token=env.get(ACCESS_TOKEN_ENV, "").strip(),
        api_url=env.get(API_URL_ENV) or data.get("api_url", DEFAULT_API_URL),
        cloud=data.get("cloud", DEFAULT_CLOUD),
        region=data.get("region", DEFAULT_REGION),
        console_url_template=data.get(
            "console_url_template", DEFAULT_CONSOLE_URL_TEMPLATE
        ),
        timeout=timeout,
    )
    config.validate()
    return config
