"""
GitHub Actions host adapter.

Reads step inputs from ``INPUT_*`` environment variables and writes outputs,
masks and failures using the workflow command protocol.
"""

from __future__ import annotations

import os
import sys
import uuid
from dataclasses import dataclass
from typing import Mapping, Optional, TextIO

from .exceptions import ConfigurationError
from .logging_config import register_secret


TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


@dataclass
class ActionInputs:
    """Inputs of the deploy action."""

    name: str
    delete: bool = False
    hasura_env: str = ""
    admin_secret: str = ""


def _environ(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def _input_variable(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(
    name: str,
    required: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Get the value of an action input.

    Args:
        name: Input name as declared in action.yml
        required: Raise if the input is empty
        environ: Environment mapping (defaults to os.environ)

    Returns:
        The trimmed input value, or "" when unset
    """
    value = _environ(environ).get(_input_variable(name), "").strip()
    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def get_boolean_input(
    name: str,
    default: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """Get a YAML 1.2 core-schema boolean input."""
    value = get_input(name, environ=environ)
    if not value:
        return default
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def read_action_inputs(environ: Optional[Mapping[str, str]] = None) -> ActionInputs:
    """Read all inputs of the deploy action."""
    return ActionInputs(
        name=get_input("name", required=True, environ=environ),
        delete=get_boolean_input("delete", environ=environ),
        hasura_env=get_input("hasuraEnv", environ=environ),
        admin_secret=get_input("adminSecret", environ=environ),
    )


def _write_command(command: str, message: str, stream: Optional[TextIO] = None) -> None:
    print(f"::{command}::{message}", file=stream or sys.stdout)


def set_output(
    name: str,
    value: Optional[str],
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Set a step output.

    Appends to the file named by ``GITHUB_OUTPUT`` when available, otherwise
    falls back to the legacy ``set-output`` command.
    """
    value = "" if value is None else str(value)
    output_path = _environ(environ).get("GITHUB_OUTPUT")

    if not output_path:
        _write_command(f"set-output name={name}", value, stream)
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ConfigurationError(f"Unexpected input: delimiter found in output {name}")

    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def set_secret(secret: Optional[str], stream: Optional[TextIO] = None) -> None:
    """Mask ``secret`` in the workflow log and in local logging."""
    if not secret:
        return
    register_secret(secret)
    _write_command("add-mask", secret, stream)


def set_failed(message: str, stream: Optional[TextIO] = None) -> None:
    """Report a failure annotation; the caller sets the exit code."""
    # Workflow commands must be single-line
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    _write_command("error", escaped, stream)
