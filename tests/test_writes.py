"""Tests for keyward.writes: put, copy and delete pass-through."""

import io

import pytest

from keyward import writes
from keyward.collect import Collector
from keyward.errors import KeywardError, SecretNotFoundError, UnsupportedOperationError
from keyward.mappingfile import parse_mapping
from keyward.porcelain import Porcelain


@pytest.fixture
def collector(registry):
    mapping = parse_mapping(
        {
            "opts": {"stage": "prod"},
            "providers": {
                "store": {
                    "kind": "inmem",
                    "options": {"data": {"prod/app/A": "1", "prod/app/B": "2"}},
                    "env_sync": {"path": "{{stage}}/app"},
                    "env": {"DB_PASS": {"path": "{{stage}}/db/pass"}},
                },
                "mirror": {
                    "kind": "inmem",
                    "env_sync": {"path": "{{stage}}/mirror"},
                },
                "readonly": {
                    "kind": "process_env",
                    "env": {"HOME": {"path": "env"}},
                },
            },
        }
    )
    return Collector(mapping, registry)


@pytest.fixture
def out():
    return io.StringIO()


def _data(collector, name):
    return collector.provider_for(name)[1].data


class TestPut:
    def test_named_key(self, collector, out):
        writes.put(collector, {"DB_PASS": "hunter2"}, ["store"], porcelain=Porcelain(out))
        assert _data(collector, "store")["prod/db/pass"] == "hunter2"
        assert "Put DB_PASS (prod/db/pass) in store: OK." in out.getvalue()

    def test_unmapped_key_reported(self, collector, out):
        writes.put(collector, {"NOPE": "x"}, ["store"], porcelain=Porcelain(out))
        assert "no such key 'NOPE' in mapping" in out.getvalue()

    def test_sync(self, collector, out):
        writes.put(collector, {"X": "1", "Y": "2"}, ["mirror"], sync=True, porcelain=Porcelain(out))
        data = _data(collector, "mirror")
        assert data == {"prod/mirror/X": "1", "prod/mirror/Y": "2"}
        assert "Synced mirror (prod/mirror): OK." in out.getvalue()

    def test_direct_path(self, collector, out):
        writes.put(collector, {"ANY": "v"}, ["store"], direct_path="custom/path", porcelain=Porcelain(out))
        assert _data(collector, "store")["custom/path"] == "v"

    def test_sync_without_env_sync(self, collector, out):
        with pytest.raises(KeywardError, match="no env sync mapping"):
            writes.put(collector, {"X": "1"}, ["readonly"], sync=True, porcelain=Porcelain(out))

    def test_without_named_mapping(self, collector, out):
        with pytest.raises(KeywardError, match="no specific key mapping"):
            writes.put(collector, {"X": "1"}, ["mirror"], porcelain=Porcelain(out))

    def test_unsupported_surfaces(self, collector, out):
        with pytest.raises(UnsupportedOperationError):
            writes.put(collector, {"HOME": "/tmp"}, ["readonly"], porcelain=Porcelain(out))


class TestSync:
    def test_copy_all(self, collector, out):
        _data(collector, "store")["prod/db/pass"] = "hunter2"
        writes.sync(collector, "store", ["mirror"], sync=True, porcelain=Porcelain(out))
        data = _data(collector, "mirror")
        assert data["prod/mirror/prod/app/A"] == "1"
        assert data["prod/mirror/prod/app/B"] == "2"
        assert data["prod/mirror/DB_PASS"] == "hunter2"

    def test_missing_named_key_aborts_copy(self, collector, out):
        with pytest.raises(SecretNotFoundError):
            writes.sync(collector, "store", ["mirror"], sync=True, porcelain=Porcelain(out))
        assert _data(collector, "mirror") == {}


class TestDelete:
    def test_named_key(self, collector, out):
        _data(collector, "store")["prod/db/pass"] = "x"
        writes.delete(collector, ["DB_PASS"], ["store"], porcelain=Porcelain(out))
        assert "prod/db/pass" not in _data(collector, "store")
        assert "Delete DB_PASS (prod/db/pass) in store: OK." in out.getvalue()

    def test_all_keys_under_path(self, collector, out):
        writes.delete(collector, [], ["store"], direct_path="prod/app", all_keys=True, porcelain=Porcelain(out))
        assert _data(collector, "store") == {}
        assert "Delete mapping in path prod/app in store: OK." in out.getvalue()

    def test_requires_provider(self, collector):
        with pytest.raises(KeywardError, match="at least one provider"):
            writes.delete(collector, ["A"], [])

    def test_requires_keys(self, collector):
        with pytest.raises(KeywardError, match="at least one key"):
            writes.delete(collector, [], ["store"])

    def test_unmapped_key_reported(self, collector, out):
        writes.delete(collector, ["NOPE"], ["store"], porcelain=Porcelain(out))
        assert "no such key 'NOPE' in mapping" in out.getvalue()
