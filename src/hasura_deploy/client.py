"""
Hasura Cloud control-plane API client.

Wraps the tenant/project GraphQL operations used to provision, update and
tear down Hasura Cloud projects. Every call is a single POST with no retries.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import requests

from .config import DeployConfig
from .env_vars import EnvPair, env_pairs_to_payload
from .exceptions import GraphQLRequestError, TransportError


logger = logging.getLogger(__name__)


# --- GraphQL documents ---
TENANT_FIELDS = """
        id
        slug
        config {
          hash
        }
        project {
          id
          name
          endpoint
        }
"""

GET_PROJECT_BY_NAME_QUERY = """
    query getProjectByName($name: String!) {
      tenant(where: {project: {name: {_eq: $name}}}, limit: 1) {%s}
    }
""" % TENANT_FIELDS

GET_TENANT_ENV_QUERY = """
    query getTenantEnv($tenantId: uuid!) {
      getTenantEnv(tenantId: $tenantId) {
        hash
        envVars
      }
    }
"""

UPDATE_TENANT_ENV_MUTATION = """
    mutation updateTenantEnv($tenantId: uuid!, $hash: String!, $envs: [UpdateEnvObject!]!) {
      updateTenantEnv(tenantId: $tenantId, currentHash: $hash, envs: $envs) {
        hash
        envVars
      }
    }
"""

CREATE_PROJECT_MUTATION = """
    mutation createProject($name: String!, $envs: [UpdateEnvsObject]) {
      createTenant(name: $name, envs: $envs, cloud: %s, region: %s) {
        tenant {%s}
      }
    }
"""

SET_PROJECT_NAME_MUTATION = """
    mutation setProjectName($name: String!, $projectId: uuid!) {
      update_projects_by_pk(pk_columns: {id: $projectId}, _set: {name: $name}) {
        id
        name
        endpoint
      }
    }
"""

DELETE_PROJECT_MUTATION = """
    mutation deleteProject($tenantId: uuid!) {
      deleteTenant(tenantId: $tenantId) {
        status
      }
    }
"""


@dataclass
class Project:
    """A Hasura Cloud project."""

    id: str
    name: str
    endpoint: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            endpoint=data.get("endpoint", ""),
        )


@dataclass
class Tenant:
    """The control-plane record binding a project to its configuration."""

    id: str
    slug: str
    config_hash: str
    project: Project

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tenant":
        return cls(
            id=data.get("id", ""),
            slug=data.get("slug", ""),
            config_hash=(data.get("config") or {}).get("hash", ""),
            project=Project.from_dict(data.get("project") or {}),
        )


@dataclass
class TenantEnv:
    """Current configuration hash and materialized environment variables."""

    hash: str
    env_vars: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TenantEnv":
        return cls(hash=data.get("hash", ""), env_vars=dict(data.get("envVars") or {}))


class HasuraCloudClient:
    """Typed wrapper around the Hasura Cloud control-plane GraphQL API."""

    def __init__(self, config: DeployConfig, session: Optional[requests.Session] = None):
        config.validate()
        self.config = config
        self._owns_session = session is None
        self.session = session or requests.Session()

    def __enter__(self) -> "HasuraCloudClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def execute(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Send a GraphQL request to the control-plane endpoint.

        Args:
            query: GraphQL document
            variables: Variables for the document

        Returns:
            The ``data`` object of the response

        Raises:
            TransportError: Network failure, non-2xx status or non-JSON body
            GraphQLRequestError: The response carried a non-empty ``errors`` list
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"pat {self.config.access_token}",
        }
        payload = {"query": query, "variables": variables or {}}

        try:
            response = self.session.post(
                self.config.api_url,
                headers=headers,
                json=payload,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Hasura Cloud API request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        # GraphQL errors win over the HTTP status, which may be 4xx for them
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            logger.error("Failed to send graphql request to hasura: %s", errors)
            raise GraphQLRequestError.from_error(errors[0])

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(
                f"Hasura Cloud API request failed: {e}", status_code=response.status_code
            ) from e

        if body is None:
            raise TransportError(
                "Hasura Cloud API returned a non-JSON response",
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            raise TransportError(
                f"Unexpected response shape: expected JSON object, got {type(body).__name__}",
                status_code=response.status_code,
            )

        return body.get("data") or {}

    def find_project_by_name(self, name: str) -> Optional[Tenant]:
        """Return the tenant whose project is called ``name``, or None."""
        data = self.execute(GET_PROJECT_BY_NAME_QUERY, {"name": name})
        tenants = data.get("tenant") or []
        if not tenants:
            return None
        return Tenant.from_dict(tenants[0])

    def get_tenant_env(self, tenant_id: str) -> TenantEnv:
        """Get the environment variables of a tenant."""
        data = self.execute(GET_TENANT_ENV_QUERY, {"tenantId": tenant_id})
        return TenantEnv.from_dict(data.get("getTenantEnv") or {})

    def update_tenant_env(
        self,
        tenant_id: str,
        current_hash: str,
        env_pairs: Iterable[EnvPair],
    ) -> TenantEnv:
        """
        Replace the environment variables of a tenant.

        ``current_hash`` must be the tenant's current config hash; a stale
        hash is rejected by the service.

        Raises:
            NothingChangedError: The submitted env set equals the current one
        """
        data = self.execute(
            UPDATE_TENANT_ENV_MUTATION,
            {
                "tenantId": tenant_id,
                "hash": current_hash,
                "envs": env_pairs_to_payload(env_pairs),
            },
        )
        return TenantEnv.from_dict(data.get("updateTenantEnv") or {})

    def create_project(self, name: str, env_pairs: Iterable[EnvPair]) -> Tenant:
        """
        Create a project and set its name.

        createTenant does not set the project name correctly, so the name is
        overwritten with a second mutation right after.
        """
        query = CREATE_PROJECT_MUTATION % (
            json.dumps(self.config.cloud),
            json.dumps(self.config.region),
            TENANT_FIELDS,
        )
        data = self.execute(
            query,
            {"name": name, "envs": env_pairs_to_payload(env_pairs)},
        )
        tenant_data = (data.get("createTenant") or {}).get("tenant")
        if not tenant_data:
            raise GraphQLRequestError(f"createTenant returned no tenant for project '{name}'")
        tenant = Tenant.from_dict(tenant_data)

        data = self.execute(
            SET_PROJECT_NAME_MUTATION,
            {"name": name, "projectId": tenant.project.id},
        )
        project_data = data.get("update_projects_by_pk")
        if not project_data:
            raise GraphQLRequestError(
                f"update_projects_by_pk returned no project for project '{name}'"
            )
        tenant.project = Project.from_dict(project_data)
        return tenant

    def delete_project(self, tenant_id: str) -> None:
        """Delete a tenant and its project."""
        self.execute(DELETE_PROJECT_MUTATION, {"tenantId": tenant_id})
