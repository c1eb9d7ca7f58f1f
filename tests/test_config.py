from __future__ import annotations

import keyring
import pytest

from hostedsearch.config import ClientConfig, default_hosts, load_config


@pytest.fixture(autouse=True)
def _no_keyring(monkeypatch):
    monkeypatch.setattr(keyring, "get_password", lambda service, name: None)


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("HOSTEDSEARCH_APPLICATION_ID", "app")
    monkeypatch.setenv("HOSTEDSEARCH_API_KEY", "key")
    monkeypatch.setenv("HOSTEDSEARCH_HOSTS", "a.search.test, b.search.test")
    monkeypatch.setenv("HOSTEDSEARCH_TIMEOUT", "4.5")

    config = load_config()

    assert config.application_id == "app"
    assert config.hosts == ["a.search.test", "b.search.test"]
    assert config.timeout == 4.5


def test_load_config_defaults_hosts(monkeypatch):
    monkeypatch.setenv("HOSTEDSEARCH_APPLICATION_ID", "app")
    monkeypatch.setenv("HOSTEDSEARCH_API_KEY", "key")
    monkeypatch.delenv("HOSTEDSEARCH_HOSTS", raising=False)
    monkeypatch.delenv("HOSTEDSEARCH_TIMEOUT", raising=False)

    config = load_config()

    assert config.hosts == default_hosts("app")
    assert config.timeout == 30.0


def test_missing_credentials(monkeypatch):
    monkeypatch.delenv("HOSTEDSEARCH_APPLICATION_ID", raising=False)
    with pytest.raises(RuntimeError):
        load_config()


def test_keyring_fallback(monkeypatch):
    secrets = {"HOSTEDSEARCH_APPLICATION_ID": "kr-app", "HOSTEDSEARCH_API_KEY": "kr-key"}
    monkeypatch.delenv("HOSTEDSEARCH_APPLICATION_ID", raising=False)
    monkeypatch.delenv("HOSTEDSEARCH_API_KEY", raising=False)
    monkeypatch.setattr(keyring, "get_password", lambda service, name: secrets.get(name))

    config = load_config()

    assert (config.application_id, config.api_key) == ("kr-app", "kr-key")


def test_config_hosts_are_copied():
    hosts = ["a.search.test"]
    config = ClientConfig("app", "key", hosts=hosts)
    hosts.append("b.search.test")
    assert config.hosts == ["a.search.test"]
