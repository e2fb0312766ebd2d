import json

import pytest

from dockerdir.errors import DockerConfigError
from dockerdir.models import DockerConfig
from dockerdir.storage.config_storage import DockerConfigStorage


@pytest.fixture
def storage(docker_dir):
    return DockerConfigStorage(docker_dir)


def test_missing_config_is_empty(tmp_path):
    """A docker dir with no config.json reads as an empty config"""
    storage = DockerConfigStorage(tmp_path / "nope")
    config = storage.read()
    assert config.to_dict() == {}
    assert config.current_context is None
    assert config.creds_store is None


def test_read_known_fields(storage):
    storage.config_path.write_text(json.dumps({
        "auths": {"ghcr.io": {"auth": "abc"}},
        "credsStore": "desktop",
        "credHelpers": {"gcr.io": "gcloud"},
        "currentContext": "colima",
    }))
    config = storage.read()
    assert config.auths == {"ghcr.io": {"auth": "abc"}}
    assert config.creds_store == "desktop"
    assert config.cred_helpers == {"gcr.io": "gcloud"}
    assert config.current_context == "colima"


def test_unknown_fields_survive_round_trip(storage):
    original = {
        "auths": {"ghcr.io": {"auth": "abc", "email": "me@example.com"}},
        "psFormat": "table {{.ID}}",
        "plugins": {"buildx": {"enabled": "true"}},
        "currentContext": "colima",
    }
    storage.config_path.write_text(json.dumps(original))

    config = storage.read()
    config.current_context = "rancher-desktop"
    storage.write(config)

    data = json.loads(storage.config_path.read_text())
    assert data["currentContext"] == "rancher-desktop"
    for key in ("auths", "psFormat", "plugins"):
        assert data[key] == original[key]


def test_write_creates_docker_dir(tmp_path):
    storage = DockerConfigStorage(tmp_path / "a" / "b")
    storage.write(DockerConfig.from_dict({"credsStore": "pass"}))
    assert json.loads(storage.config_path.read_text()) == {"credsStore": "pass"}
    # no temp files left behind
    assert [p.name for p in storage.docker_dir.iterdir()] == ["config.json"]


def test_corrupt_config_propagates(storage):
    storage.config_path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        storage.read()


def test_non_object_config_rejected(storage):
    storage.config_path.write_text("[]")
    with pytest.raises(DockerConfigError):
        storage.read()


def test_docker_config_env(monkeypatch, tmp_path):
    """DOCKER_CONFIG picks the directory when none is passed"""
    monkeypatch.setenv("DOCKER_CONFIG", str(tmp_path))
    assert DockerConfigStorage().config_path == tmp_path / "config.json"


def test_clearing_field_removes_key():
    config = DockerConfig.from_dict({"currentContext": "x", "credsStore": "y"})
    config.current_context = None
    assert "currentContext" not in config.to_dict()
    assert config.creds_store == "y"


def test_copy_is_deep():
    config = DockerConfig.from_dict({"auths": {"a": {"auth": "1"}}})
    clone = config.copy()
    clone.data["auths"]["a"]["auth"] = "2"
    assert config.auths["a"]["auth"] == "1"
    assert clone != config
