"""
Shared test fixtures for hasura-deploy tests.

These fixtures provide canned API payloads and mock collaborators so unit
tests run without network access or a real Hasura Cloud account.
"""
import logging
from unittest.mock import MagicMock

import pytest

from hasura_deploy.client import HasuraCloudClient, Project, Tenant, TenantEnv
from hasura_deploy.config import DeployConfig
from hasura_deploy.logging_config import PACKAGE_LOGGER, secret_filter


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() and registered secrets between tests."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    secret_filter.clear()


@pytest.fixture
def deploy_config():
    """Valid configuration with a dummy token."""
    return DeployConfig(access_token="test_pat_token")


@pytest.fixture
def tenant_data():
    """Tenant object as returned by the control-plane API."""
    return {
        "id": "tenant-123",
        "slug": "brave-otter-42",
        "config": {"hash": "hash-abc"},
        "project": {
            "id": "project-456",
            "name": "my-preview",
            "endpoint": "https://brave-otter-42.hasura.app",
        },
    }


@pytest.fixture
def tenant():
    """Tenant dataclass matching tenant_data."""
    return Tenant(
        id="tenant-123",
        slug="brave-otter-42",
        config_hash="hash-abc",
        project=Project(
            id="project-456",
            name="my-preview",
            endpoint="https://brave-otter-42.hasura.app",
        ),
    )


@pytest.fixture
def tenant_env():
    """TenantEnv holding an admin secret."""
    return TenantEnv(
        hash="hash-def",
        env_vars={
            "HASURA_GRAPHQL_ADMIN_SECRET": "s3cr3tAdminValue",
            "HASURA_GRAPHQL_ENABLE_CONSOLE": "true",
        },
    )


@pytest.fixture
def mock_client():
    """MagicMock standing in for HasuraCloudClient."""
    return MagicMock(spec=HasuraCloudClient)


@pytest.fixture
def make_response():
    """Factory for mock requests.Response objects."""
    def _make(json_body=None, status_code=200, json_error=None):
        response = MagicMock()
        response.status_code = status_code
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = json_body
        response.raise_for_status.return_value = None
        return response

    return _make


@pytest.fixture
def mock_session():
    """MagicMock standing in for requests.Session."""
    return MagicMock()
