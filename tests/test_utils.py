import json
import stat
import sys

import pytest

from dockerdir.models import DockerConfig
from dockerdir.storage.config_storage import DockerConfigStorage
from dockerdir.utils.utils import best_effort, write_atomic

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="symlinks and mode bits")


@posix_only
def test_write_follows_symlink(tmp_path):
    """A symlinked config.json stays a symlink and its target gets the new content"""
    dotfiles = tmp_path / "dotfiles"
    dotfiles.mkdir()
    target = dotfiles / "docker-config.json"
    target.write_text("{}")
    docker_dir = tmp_path / "docker"
    docker_dir.mkdir()
    (docker_dir / "config.json").symlink_to(target)

    DockerConfigStorage(docker_dir).write(DockerConfig.from_dict({"credsStore": "pass"}))

    assert (docker_dir / "config.json").is_symlink()
    assert json.loads(target.read_text()) == {"credsStore": "pass"}
    assert sorted(p.name for p in dotfiles.iterdir()) == ["docker-config.json"]


@posix_only
def test_write_keeps_existing_mode(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{}")
    path.chmod(0o644)

    write_atomic(path, '{"a": 1}')

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
    assert path.read_text() == '{"a": 1}'


def test_best_effort_runs_every_step():
    calls = []

    def fail():
        calls.append("fail")
        raise RuntimeError("boom")

    errors = best_effort("testing", fail, lambda: calls.append("ok"))
    assert calls == ["fail", "ok"]
    assert [str(e) for e in errors] == ["boom"]
