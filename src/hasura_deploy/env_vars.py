"""
Parsing and manipulation of Hasura project environment variables.

The raw format is one ``KEY=VALUE`` pair per line. Anything after the first
``;`` on a line is a comment, even inside quotes. Only the first ``=`` splits
key from value, and quotes are kept verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from .exceptions import ConfigurationError


ADMIN_SECRET_KEY = "HASURA_GRAPHQL_ADMIN_SECRET"


@dataclass(frozen=True)
class EnvPair:
    """A single environment variable as sent to Hasura Cloud."""

    key: str
    value: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}


def _parse_line(line: str) -> EnvPair:
    # Everything after the first ";" is a comment
    definition = line.strip().split(";", 1)[0].strip()
    key, _, value = definition.partition("=")
    return EnvPair(key=key.strip(), value=value)


def parse_env_vars(raw_env_vars: Optional[str]) -> list[EnvPair]:
    """
    Parse raw environment variable text into ordered key/value pairs.

    Lines without a key (blank lines, bare comments) are dropped. Duplicate
    keys are kept as separate entries.

    Args:
        raw_env_vars: Multi-line ``KEY=VALUE`` text

    Returns:
        List of EnvPair in input order
    """
    if not raw_env_vars:
        return []

    pairs = [_parse_line(line) for line in raw_env_vars.strip().split("\n")]
    return [pair for pair in pairs if pair.key]


def load_env_file(path: Union[str, Path]) -> list[EnvPair]:
    """
    Read and parse an environment variable file.

    Args:
        path: Path to the file

    Returns:
        List of EnvPair in file order
    """
    env_file = Path(path)
    if not env_file.exists():
        raise ConfigurationError(f"Env file not found: {path}")

    with open(env_file) as f:
        return parse_env_vars(f.read())


def get_env_value(pairs: Iterable[EnvPair], key: str) -> Optional[str]:
    """Return the value for ``key``, last occurrence wins, or None."""
    value = None
    for pair in pairs:
        if pair.key == key:
            value = pair.value
    return value


def set_env_value(pairs: Iterable[EnvPair], key: str, value: str) -> list[EnvPair]:
    """
    Return a copy of ``pairs`` with ``key`` set to ``value``.

    The first existing entry for ``key`` is replaced in place and any later
    duplicates are removed. A missing key is appended.
    """
    result: list[EnvPair] = []
    found = False
    for pair in pairs:
        if pair.key != key:
            result.append(pair)
        elif not found:
            result.append(EnvPair(key=key, value=value))
            found = True

    if not found:
        result.append(EnvPair(key=key, value=value))
    return result


def env_pairs_to_payload(pairs: Iterable[EnvPair]) -> list[dict[str, str]]:
    """Convert pairs to the ``[{key, value}]`` shape the API expects."""
    return [pair.to_dict() for pair in pairs]
