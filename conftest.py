"""
Root-level shared test fixtures.

Inherited by tests/ and keyward/providers/tests/.
"""

from __future__ import annotations

import pytest

from keyward.config import reset_config
from keyward.mappingfile import parse_mapping
from keyward.models import EnvEntry
from keyward.providers.inmem import InMemProvider
from keyward.providers.registry import default_registry


@pytest.fixture
def clean_env(monkeypatch):
    """Remove keyward env vars that leak between tests."""
    for key in ["KEYWARD_CONFIG", "KEYWARD_LOG_LEVEL", "KEYWARD_MAX_LINE_BYTES"]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def registry():
    """Fresh registry with the built-in providers."""
    return default_registry()


@pytest.fixture
def billing_data():
    return {
        "prod/billing/FOO": "foo_shazam",
        "prod/billing/MG_KEY": "mg_shazam",
        "prod/billing/BEFORE_REMAP": "test_env_remap",
    }


@pytest.fixture
def billing_mapping(billing_data):
    """One namespace-sync inmem instance under {{stage}}/billing."""
    return parse_mapping(
        {
            "project": "billing",
            "opts": {"stage": "prod"},
            "providers": {
                "inmem": {
                    "options": {"data": billing_data},
                    "env_sync": {"path": "{{stage}}/billing"},
                },
            },
        },
        "test.yml",
    )


@pytest.fixture
def inmem():
    return InMemProvider()


def make_entry(key: str, value: str, **kwargs) -> EnvEntry:
    """Found entry with sensible defaults for tests."""
    kwargs.setdefault("provider_name", "inmem")
    return EnvEntry(key=key, value=value, **kwargs)


@pytest.fixture
def entry():
    return make_entry
