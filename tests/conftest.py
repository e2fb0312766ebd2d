import json
import os
import shutil
import socket
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def docker_dir(tmp_path):
    """An empty docker CLI config dir"""
    path = tmp_path / "docker"
    path.mkdir()
    return path


def write_context(docker_dir: Path, dir_name: str, name: str, host: str = None):
    """Write a context meta.json the way the docker CLI lays it out"""
    data = {"Name": name, "Metadata": {}, "Endpoints": {}}
    if host is not None:
        data["Endpoints"]["docker"] = {"Host": host, "SkipTLSVerify": False}
    path = docker_dir / "contexts" / "meta" / dir_name / "meta.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def unix_socket():
    """Path of a live unix socket; kept short to fit the sun_path limit"""
    if not hasattr(socket, "AF_UNIX"):
        pytest.skip("unix sockets not supported")
    sock_dir = tempfile.mkdtemp(prefix="dd", dir="/tmp" if os.path.isdir("/tmp") else None)
    path = os.path.join(sock_dir, "d.sock")
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.bind(path)
    yield path
    sock.close()
    shutil.rmtree(sock_dir, ignore_errors=True)
