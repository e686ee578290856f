"""Tests for the dotenv provider."""

import pytest

from keyward.errors import BackendUnavailableError, UnsupportedOperationError
from keyward.models import KeyPath
from keyward.providers.dotenv import DotenvProvider


@pytest.fixture
def envfile(tmp_path):
    f = tmp_path / "app.env"
    f.write_text("DB_PASS=hunter2\nAPI_KEY='quoted value'\n")
    return f


class TestDotenv:
    def test_get(self, envfile):
        ent = DotenvProvider().get(KeyPath(env="DB_PASS", path=str(envfile)))
        assert ent.found
        assert ent.value == "hunter2"

    def test_get_by_field(self, envfile):
        ent = DotenvProvider().get(KeyPath(env="SOMETHING", field="API_KEY", path=str(envfile)))
        assert ent.key == "SOMETHING"
        assert ent.value == "quoted value"

    def test_get_missing_key(self, envfile):
        assert not DotenvProvider().get(KeyPath(env="NOPE", path=str(envfile))).found

    def test_missing_file(self, tmp_path):
        with pytest.raises(BackendUnavailableError):
            DotenvProvider().get(KeyPath(env="A", path=str(tmp_path / "none.env")))

    def test_get_mapping(self, envfile):
        entries = DotenvProvider().get_mapping(KeyPath(path=str(envfile)))
        assert {e.key: e.value for e in entries} == {"DB_PASS": "hunter2", "API_KEY": "quoted value"}

    def test_home_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".x.env").write_text("A=1\n")
        assert DotenvProvider().get(KeyPath(env="A", path="~/.x.env")).value == "1"

    def test_put_creates_file(self, tmp_path):
        target = tmp_path / "nested" / "new.env"
        p = DotenvProvider()
        p.put(KeyPath(env="TOKEN", path=str(target)), "abc")
        assert p.get(KeyPath(env="TOKEN", path=str(target))).value == "abc"

    def test_put_mapping_merges(self, envfile):
        p = DotenvProvider()
        p.put_mapping(KeyPath(path=str(envfile)), {"NEW": "1", "DB_PASS": "changed"})
        entries = {e.key: e.value for e in p.get_mapping(KeyPath(path=str(envfile)))}
        assert entries["NEW"] == "1"
        assert entries["DB_PASS"] == "changed"
        assert entries["API_KEY"] == "quoted value"

    def test_delete(self, envfile):
        p = DotenvProvider()
        p.delete(KeyPath(env="DB_PASS", path=str(envfile)))
        assert not p.get(KeyPath(env="DB_PASS", path=str(envfile))).found

    def test_delete_mapping_unsupported(self, envfile):
        with pytest.raises(UnsupportedOperationError):
            DotenvProvider().delete_mapping(KeyPath(path=str(envfile)))
