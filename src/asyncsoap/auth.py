import os
from collections.abc import Mapping
from enum import StrEnum
from typing import Optional

from httpx import Auth, BasicAuth
from httpx_ntlm import HttpNtlmAuth

from .exceptions import ConfigurationError


class AuthMethod(StrEnum):
    Basic = "basic"
    NTLM = "ntlm"


def basic(username: str, password: str) -> Auth:
    """HTTP Basic authentication."""
    return BasicAuth(username, password)


def ntlm(username: str, password: str) -> Auth:
    """NTLM authentication, for services hosted behind IIS."""
    return HttpNtlmAuth(username, password)


def resolve(method: str | AuthMethod, username: str, password: str) -> Auth:
    """
    Creates an authentication strategy by name.

    :raises ConfigurationError: If the method is not supported.
    """
    try:
        method = AuthMethod(str(method).lower())
    except ValueError as e:
        raise ConfigurationError(f"Unknown auth method '{method}'") from e

    if method == AuthMethod.NTLM:
        return ntlm(username, password)
    return basic(username, password)


def from_env(prefix: str = "SOAP_AUTH", environ: Optional[Mapping[str, str]] = None) -> Optional[Auth]:
    """
    Reads an authentication strategy from ``<prefix>_METHOD``, ``<prefix>_USERNAME`` and ``<prefix>_PASSWORD``.

    :return: None if no username is set. The method defaults to basic.
    """
    environ = os.environ if environ is None else environ
    username = environ.get(f"{prefix}_USERNAME")
    if not username:
        return None
    return resolve(
        environ.get(f"{prefix}_METHOD", AuthMethod.Basic),
        username,
        environ.get(f"{prefix}_PASSWORD", ""),
    )


__all__ = ["AuthMethod", "basic", "ntlm", "resolve", "from_env"]
