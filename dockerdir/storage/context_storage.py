import json
import logging
import shutil
from pathlib import Path
from typing import Iterator, Optional

import yaml

from dockerdir.models import CONTEXT_DIR_NAME, DEFAULT_SOCKET, ContextMetadata
from dockerdir.utils.utils import get_docker_dir, write_atomic

logger = logging.getLogger(__name__)


class ContextStorage:
    """Storage for docker context metadata under <docker dir>/contexts/meta"""

    def __init__(self, docker_dir: Path = None):
        self.docker_dir = get_docker_dir(docker_dir)
        self.meta_dir = self.docker_dir / "contexts" / "meta"
        self.own_context_path = self.meta_dir / CONTEXT_DIR_NAME / "meta.json"

    def _read_context(self, path: Path) -> ContextMetadata:
        # meta.json is JSON, which safe_load reads as YAML
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")
        return ContextMetadata.from_dict(data)

    def iter_contexts(self) -> Iterator[ContextMetadata]:
        """Yield every readable context; bad entries are logged and skipped.

        Listing the meta directory itself is not guarded: if that fails the
        error propagates to the caller.
        """
        for entry in sorted(self.meta_dir.iterdir()):
            try:
                context = self._read_context(entry / "meta.json")
            except (OSError, ValueError, TypeError, AttributeError, yaml.YAMLError) as ex:
                logger.info("Failed to read context %s, skipping: %s", entry.name, ex)
                continue
            yield context

    def get_current_docker_socket(self, current_context: Optional[str] = None) -> str:
        """Return the docker socket URI used by a context, or the default socket"""
        if not current_context:
            return DEFAULT_SOCKET

        for context in self.iter_contexts():
            if context.name == current_context:
                host = context.docker_host
                return host if host is not None else DEFAULT_SOCKET

        # stale context name
        return DEFAULT_SOCKET

    def write_own_context(self, context: ContextMetadata):
        """Overwrite our own context's meta.json"""
        logger.debug("Updating docker context: writing to %s: %s", self.own_context_path, context.to_dict())
        self.own_context_path.parent.mkdir(parents=True, exist_ok=True)
        write_atomic(self.own_context_path, json.dumps(context.to_dict()))

    def remove_own_context(self):
        """Remove our own context directory; missing is fine"""
        try:
            shutil.rmtree(self.own_context_path.parent)
        except FileNotFoundError:
            pass

    def __repr__(self):
        return f"<ContextStorage meta_dir={self.meta_dir}>"
