import json
import logging
from pathlib import Path

from dockerdir.errors import DockerConfigError
from dockerdir.models import DockerConfig
from dockerdir.utils.utils import get_docker_dir, write_atomic

logger = logging.getLogger(__name__)


class DockerConfigStorage:
    """JSON-based storage for docker's config.json (read-modify-write, never cached)"""

    def __init__(self, docker_dir: Path = None):
        """Initialize storage with default or custom docker dir"""
        self.docker_dir = get_docker_dir(docker_dir)
        self.config_path = self.docker_dir / "config.json"

    def _read_data(self) -> dict:
        """Read raw data from storage; a missing file is an empty config"""
        try:
            raw = json.loads(self.config_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        if not isinstance(raw, dict):
            raise DockerConfigError(self.config_path, f"expected a JSON object, got {type(raw).__name__}")
        return raw

    def _write_data(self, data: dict):
        """Write raw data to storage, creating the docker dir if needed"""
        self.docker_dir.mkdir(parents=True, exist_ok=True)
        write_atomic(self.config_path, json.dumps(data, indent=2))

    def read(self) -> DockerConfig:
        """Load docker config from disk"""
        return DockerConfig.from_dict(self._read_data())

    def write(self, config: DockerConfig):
        """Overwrite docker config on disk with the full object"""
        self._write_data(config.to_dict())
