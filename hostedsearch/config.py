from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from hostedsearch.utils.secure_store import get_secret

APP_ID_ENV = "HOSTEDSEARCH_APPLICATION_ID"
API_KEY_ENV = "HOSTEDSEARCH_API_KEY"
HOSTS_ENV = "HOSTEDSEARCH_HOSTS"
TIMEOUT_ENV = "HOSTEDSEARCH_TIMEOUT"

DEFAULT_TIMEOUT = 30.0


def default_hosts(application_id: str) -> List[str]:
    return [f"{application_id}-{n}.algolia.net" for n in (1, 2, 3)]


@dataclass
class ClientConfig:
    application_id: str
    api_key: str
    hosts: List[str] = field(default_factory=list)
    timeout: float = DEFAULT_TIMEOUT
    scheme: str = "https"
    user_agent: str | None = None

    def __post_init__(self) -> None:
        if not self.hosts:
            self.hosts = default_hosts(self.application_id)
        else:
            self.hosts = list(self.hosts)


def load_config() -> ClientConfig:
    """Build a :class:`ClientConfig` from the environment and the keyring."""

    application_id = get_secret(APP_ID_ENV)
    api_key = get_secret(API_KEY_ENV)
    hosts_env = os.getenv(HOSTS_ENV, "")
    hosts = [h.strip() for h in hosts_env.split(",") if h.strip()]
    timeout_env = os.getenv(TIMEOUT_ENV)
    timeout = float(timeout_env) if timeout_env else DEFAULT_TIMEOUT
    return ClientConfig(application_id=application_id, api_key=api_key, hosts=hosts, timeout=timeout)


__all__ = ["ClientConfig", "load_config", "default_hosts", "DEFAULT_TIMEOUT"]
