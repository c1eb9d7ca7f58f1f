from __future__ import annotations

import keyring
import pytest

from hostedsearch.utils import get_secret, set_secret
from hostedsearch.utils.secure_store import KEYRING_SERVICE


@pytest.fixture
def fake_keyring(monkeypatch):
    store = {}
    monkeypatch.setattr(keyring, "set_password", lambda service, name, value: store.__setitem__((service, name), value))
    monkeypatch.setattr(keyring, "get_password", lambda service, name: store.get((service, name)))
    return store


def test_set_secret_round_trip(monkeypatch, fake_keyring):
    monkeypatch.delenv("HOSTEDSEARCH_API_KEY", raising=False)

    set_secret("HOSTEDSEARCH_API_KEY", "stored-key")

    assert fake_keyring == {(KEYRING_SERVICE, "HOSTEDSEARCH_API_KEY"): "stored-key"}
    assert get_secret("HOSTEDSEARCH_API_KEY") == "stored-key"


def test_environment_wins_over_keyring(monkeypatch, fake_keyring):
    set_secret("HOSTEDSEARCH_API_KEY", "stored-key")
    monkeypatch.setenv("HOSTEDSEARCH_API_KEY", "env-key")
    assert get_secret("HOSTEDSEARCH_API_KEY") == "env-key"


def test_missing_secret_uses_fallback_or_raises(monkeypatch, fake_keyring):
    monkeypatch.delenv("HOSTEDSEARCH_MISSING", raising=False)
    assert get_secret("HOSTEDSEARCH_MISSING", fallback="dflt") == "dflt"
    with pytest.raises(RuntimeError):
        get_secret("HOSTEDSEARCH_MISSING")
