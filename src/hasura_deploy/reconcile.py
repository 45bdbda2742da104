"""
Reconcile a Hasura Cloud project with its desired state.

Given a project name, desired env vars and a delete flag, look the project up
and create it, update its env in place, or delete it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence
from urllib.parse import urljoin

from .client import HasuraCloudClient, Tenant, TenantEnv
from .config import DEFAULT_CONSOLE_URL_TEMPLATE
from .env_vars import ADMIN_SECRET_KEY, EnvPair, get_env_value, set_env_value
from .exceptions import NothingChangedError
from .tokens import generate_admin_secret


logger = logging.getLogger(__name__)

GRAPHQL_PATH = "/v1/graphql"


class ReconcileAction(str, Enum):
    """What a reconcile run did to the remote project."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"
    NOTHING_TO_DELETE = "nothing_to_delete"


@dataclass
class ReconcileResult:
    """Connection details of a provisioned project."""

    cloud_url: str
    graphql_endpoint: str
    console_url: str
    admin_secret: Optional[str]
    project_name: str
    project_id: str

    @classmethod
    def build(
        cls,
        tenant: Tenant,
        tenant_env: TenantEnv,
        console_url_template: str = DEFAULT_CONSOLE_URL_TEMPLATE,
    ) -> "ReconcileResult":
        project = tenant.project
        return cls(
            cloud_url=project.endpoint,
            graphql_endpoint=urljoin(project.endpoint, GRAPHQL_PATH),
            console_url=console_url_template.format(project_id=project.id),
            admin_secret=tenant_env.env_vars.get(ADMIN_SECRET_KEY) or None,
            project_name=project.name,
            project_id=project.id,
        )

    def to_outputs(self) -> dict[str, Optional[str]]:
        """Map the result to the action's output names."""
        return {
            "cloudUrl": self.cloud_url,
            "graphQLEndpoint": self.graphql_endpoint,
            "consoleURL": self.console_url,
            "adminSecret": self.admin_secret,
            "projectName": self.project_name,
            "projectId": self.project_id,
        }


@dataclass
class ReconcileOutcome:
    """Action taken plus the result descriptor for non-delete paths."""

    action: ReconcileAction
    result: Optional[ReconcileResult] = None


def plan_action(tenant: Optional[Tenant], should_delete: bool) -> ReconcileAction:
    """Decide which action a reconcile run would take."""
    if should_delete:
        return ReconcileAction.DELETED if tenant else ReconcileAction.NOTHING_TO_DELETE
    return ReconcileAction.UPDATED if tenant else ReconcileAction.CREATED


def reconcile(
    client: HasuraCloudClient,
    name: str,
    env_pairs: Sequence[EnvPair] = (),
    should_delete: bool = False,
    admin_secret: Optional[str] = None,
    secret_factory: Callable[[], str] = generate_admin_secret,
    console_url_template: str = DEFAULT_CONSOLE_URL_TEMPLATE,
) -> ReconcileOutcome:
    """
    Drive the remote project named ``name`` toward the desired state.

    Args:
        client: Hasura Cloud API client
        name: Project name
        env_pairs: Desired environment variables
        should_delete: Delete the project instead of creating/updating it
        admin_secret: Overrides any admin secret in ``env_pairs``
        secret_factory: Produces an admin secret for new projects that lack one
        console_url_template: Console URL with a ``{project_id}`` placeholder

    Returns:
        ReconcileOutcome with the action taken; ``result`` is None for deletes

    Raises:
        HasuraDeployError: Any API failure other than a no-op env update
    """
    pairs = list(env_pairs)
    if admin_secret:
        pairs = set_env_value(pairs, ADMIN_SECRET_KEY, admin_secret)

    tenant = client.find_project_by_name(name)
    action = plan_action(tenant, should_delete)

    if action is ReconcileAction.DELETED:
        client.delete_project(tenant.id)
        logger.info("Deleted project with name %s.", name)
        return ReconcileOutcome(action)

    if action is ReconcileAction.NOTHING_TO_DELETE:
        logger.info('Project with name "%s" does not exist. Nothing to delete.', name)
        return ReconcileOutcome(action)

    if action is ReconcileAction.UPDATED:
        logger.debug('Project with name "%s" already exists. Updating env...', name)
        try:
            tenant_env = client.update_tenant_env(tenant.id, tenant.config_hash, pairs)
            logger.info("Project with name %s updated successfully.", tenant.project.name)
        except NothingChangedError:
            logger.debug("No config changes detected. Skipping update.")
            action = ReconcileAction.UNCHANGED
            tenant_env = client.get_tenant_env(tenant.id)
    else:
        logger.debug('Project with name "%s" does not exist. Creating...', name)
        if not get_env_value(pairs, ADMIN_SECRET_KEY):
            pairs = set_env_value(pairs, ADMIN_SECRET_KEY, secret_factory())
        tenant = client.create_project(name, pairs)
        tenant_env = client.get_tenant_env(tenant.id)
        logger.info('Project with name "%s" created successfully.', tenant.project.name)

    return ReconcileOutcome(
        action, ReconcileResult.build(tenant, tenant_env, console_url_template)
    )
