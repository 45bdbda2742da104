"""Random admin secret generation."""

import base64
import re
import secrets


ADMIN_SECRET_LENGTH = 30

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def generate_admin_secret(length: int = ADMIN_SECRET_LENGTH) -> str:
    """
    Generate a random alphanumeric admin secret.

    Base64 output loses its ``+``, ``/`` and ``=`` characters when stripped,
    so bytes are drawn until enough characters have accumulated.

    Args:
        length: Number of characters to return

    Returns:
        A string of exactly ``length`` characters from ``[A-Za-z0-9]``
    """
    secret = ""
    while len(secret) < length:
        encoded = base64.b64encode(secrets.token_bytes(length)).decode("ascii")
        secret += _NON_ALPHANUMERIC.sub("", encoded)
    return secret[:length]
