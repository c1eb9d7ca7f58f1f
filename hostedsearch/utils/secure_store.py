"""Helpers for retrieving credentials from env vars or the system keyring."""
from __future__ import annotations

import os

import keyring
from keyring.errors import KeyringError

KEYRING_SERVICE = "hostedsearch"


def get_secret(name: str, *, fallback: str | None = None) -> str:
    """Return a secret from the environment or the system keyring.

    Parameters
    ----------
    name:
        Environment variable and credential name.
    fallback:
        Value to return when the secret is absent. If ``None`` and the secret
        cannot be found, :class:`RuntimeError` is raised.
    """

    env = os.getenv(name)
    if env:
        return env
    try:
        value = keyring.get_password(KEYRING_SERVICE, name)
    except KeyringError:
        value = None
    if value:
        return value
    if fallback is not None:
        return fallback
    raise RuntimeError(f"Secret {name} not found")


def set_secret(name: str, value: str) -> None:
    """Store ``value`` under ``name`` in the system keyring."""
    keyring.set_password(KEYRING_SERVICE, name, value)


__all__ = ["get_secret", "set_secret", "KEYRING_SERVICE"]
