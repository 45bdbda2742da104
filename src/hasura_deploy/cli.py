#!/usr/bin/env python3
"""
Hasura Cloud Project Deploy Script

Creates, updates or deletes a Hasura Cloud project and publishes its
connection details as GitHub Actions outputs.

Usage:
    python -m hasura_deploy                                  # Read action inputs
    python -m hasura_deploy --name my-preview --env-file .env.hasura
    python -m hasura_deploy --name my-preview --delete
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .actions import ActionInputs, read_action_inputs, set_failed, set_output, set_secret
from .client import HasuraCloudClient
from .config import load_config
from .env_vars import EnvPair, load_env_file, parse_env_vars
from .exceptions import GraphQLRequestError, HasuraDeployError
from .logging_config import configure_logging, register_secret
from .reconcile import ReconcileResult, plan_action, reconcile


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hasura-deploy",
        description="Provision, update or delete a Hasura Cloud project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Run as a GitHub Action step (inputs from INPUT_* variables):
    python -m hasura_deploy

  Create or update a project:
    python -m hasura_deploy --name my-preview --env-file .env.hasura

  Delete a project:
    python -m hasura_deploy --name my-preview --delete

The access token is read from HASURA_CLOUD_ACCESS_TOKEN.
        """,
    )

    parser.add_argument(
        "--name",
        help="Project name (default: the action's 'name' input)",
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Delete the project instead of creating/updating it (requires --name)",
    )
    parser.add_argument(
        "--env",
        default="",
        help="Raw KEY=VALUE environment variables, one per line (requires --name)",
    )
    parser.add_argument(
        "--env-file",
        help="File with KEY=VALUE environment variables (appended after --env)",
    )
    parser.add_argument(
        "--admin-secret",
        default="",
        help="Admin secret; overrides HASURA_GRAPHQL_ADMIN_SECRET from the env (requires --name)",
    )
    parser.add_argument(
        "--config",
        help="Optional YAML configuration file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Look the project up and report what would be done",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed logging output",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    return parser


def resolve_inputs(args: argparse.Namespace) -> ActionInputs:
    """Take inputs from the command line, or from the action when no name is given."""
    if not args.name:
        return read_action_inputs()
    return ActionInputs(
        name=args.name,
        delete=args.delete,
        hasura_env=args.env,
        admin_secret=args.admin_secret,
    )


def resolve_env_pairs(inputs: ActionInputs, env_file: Optional[str] = None) -> list[EnvPair]:
    pairs = parse_env_vars(inputs.hasura_env)
    if env_file:
        pairs.extend(load_env_file(env_file))
    return pairs


def publish_outputs(result: ReconcileResult) -> None:
    """Mask the admin secret and set every output of the action."""
    set_secret(result.admin_secret)
    outputs = result.to_outputs()
    logger.info("Outputs: %s", outputs)
    for key, value in outputs.items():
        set_output(key, value)


def run(args: argparse.Namespace) -> int:
    """
    Execute one deploy run.

    Returns:
        Process exit code
    """
    try:
        inputs = resolve_inputs(args)
        register_secret(inputs.admin_secret)
        env_pairs = resolve_env_pairs(inputs, args.env_file)

        config = load_config(args.config)
        register_secret(config.access_token)
        logger.debug("Using %r", config)

        with HasuraCloudClient(config) as client:
            if args.dry_run:
                tenant = client.find_project_by_name(inputs.name)
                action = plan_action(tenant, inputs.delete)
                logger.info(
                    'Dry run: project "%s" would be %s.',
                    inputs.name,
                    action.value.replace("_", " "),
                )
                return 0

            outcome = reconcile(
                client,
                inputs.name,
                env_pairs,
                should_delete=inputs.delete,
                admin_secret=inputs.admin_secret or None,
                console_url_template=config.console_url_template,
            )

        if outcome.result is not None:
            publish_outputs(outcome.result)
    except GraphQLRequestError as e:
        logger.error("Hasura Cloud API error: %s", e.detail)
        set_failed(str(e))
        return 1
    except HasuraDeployError as e:
        logger.error("%s", e)
        set_failed(str(e))
        return 1
    except Exception as e:
        logger.exception("Unexpected error during deploy")
        set_failed(f"{type(e).__name__}: {e}")
        return 1

    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.name and (args.delete or args.env or args.admin_secret):
        parser.error("--delete, --env and --admin-secret require --name")
    configure_logging(verbose=args.verbose, json_format=args.json_logs)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(130)


if __name__ == "__main__":
    main()
