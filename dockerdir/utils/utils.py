import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


def get_docker_dir(docker_dir: Optional[Path] = None) -> Path:
    """Return the docker CLI config dir: explicit path, $DOCKER_CONFIG, or ~/.docker"""
    if docker_dir:
        return Path(docker_dir)
    env_dir = os.environ.get("DOCKER_CONFIG")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".docker"


def write_atomic(path: Path, text: str):
    """Write text to path via a temp file in the same dir plus os.replace.

    Symlinks are followed so the link survives, and an existing file keeps
    its permission bits.
    """
    path = Path(path).resolve()
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        try:
            shutil.copymode(path, tmp_name)
        except FileNotFoundError:
            pass
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def best_effort(description: str, *steps: Callable[[], object]) -> List[Exception]:
    """Run each step in order, logging and collecting errors instead of raising.

    Used for cleanup paths where partial success is fine. Every step runs even
    if an earlier one failed; the caller gets the list of errors back.
    """
    errors: List[Exception] = []
    for step in steps:
        try:
            step()
        except Exception as ex:
            logger.debug("Ignoring error when %s: %s", description, ex)
            errors.append(ex)
    return errors
