"""
Hasura Cloud project deployment package.

This package provisions, updates or tears down Hasura Cloud projects from CI
and publishes their connection details as GitHub Actions outputs.
"""

from .client import HasuraCloudClient, Project, Tenant, TenantEnv
from .config import DeployConfig, load_config
from .env_vars import EnvPair, parse_env_vars
from .exceptions import (
    ConfigurationError,
    GraphQLErrorKind,
    GraphQLRequestError,
    HasuraDeployError,
    MissingCredentialError,
    NothingChangedError,
    TransportError,
)
from .reconcile import ReconcileAction, ReconcileOutcome, ReconcileResult, reconcile
from .tokens import generate_admin_secret

__version__ = "1.0.0"

__all__ = [
    "HasuraDeployError",
    "ConfigurationError",
    "MissingCredentialError",
    "TransportError",
    "GraphQLRequestError",
    "GraphQLErrorKind",
    "NothingChangedError",
    "DeployConfig",
    "load_config",
    "EnvPair",
    "parse_env_vars",
    "HasuraCloudClient",
    "Project",
    "Tenant",
    "TenantEnv",
    "ReconcileAction",
    "ReconcileOutcome",
    "ReconcileResult",
    "reconcile",
    "generate_admin_secret",
]
