"""Reconciles everything under the docker CLI config directory.

DockerDirManager is the entry point used by the rest of the application. It
never caches anything read from disk: config.json and the context metadata
can be edited by the docker CLI or the user at any time, so every operation
re-reads what it needs and writes whole files back.
"""

import logging
import os
import platform
import stat
from pathlib import Path
from typing import List, Optional

from dockerdir.credentials import CredentialHelperChecker
from dockerdir.models import (
    CONTEXT_DESCRIPTION,
    CONTEXT_NAME,
    UNIX_SCHEME,
    ContextMetadata,
    Endpoint,
)
from dockerdir.storage.config_storage import DockerConfigStorage
from dockerdir.storage.context_storage import ContextStorage
from dockerdir.utils.utils import best_effort, get_docker_dir

logger = logging.getLogger(__name__)

# platforms where docker contexts point at a unix socket we provide
UNIX_CONTEXT_PLATFORMS = ("Darwin", "Linux")
BROKEN_HELPER_NAME = "desktop"


class DockerDirManager:
    """Manages config.json, our docker context and the credential store setting"""

    context_name = CONTEXT_NAME

    def __init__(self, docker_dir: Path = None, checker: CredentialHelperChecker = None):
        self.docker_dir = get_docker_dir(docker_dir)
        self.config_storage = DockerConfigStorage(self.docker_dir)
        self.context_storage = ContextStorage(self.docker_dir)
        self.checker = checker or CredentialHelperChecker()
        logger.debug("Created new DockerDirManager to manage dir: %s", self.docker_dir)

    def get_current_docker_socket(self, current_context: Optional[str] = None) -> str:
        """Socket URI of the given context; the default socket if it is unset or invalid"""
        return self.context_storage.get_current_docker_socket(current_context)

    def get_desired_docker_context(self, owns_default_socket: bool, current_context: Optional[str]) -> Optional[str]:
        """Return the context docker should use, or None for docker's default context.

        In order of preference:
        1. If we own the default socket, use the default context; it has the
           widest compatibility.
        2. Keep the current context if it points at a live unix socket (the
           user is probably using it) or at a non-unix socket, which we
           can't check.
        3. Otherwise the current context is broken or absent; use ours.
        """
        if owns_default_socket:
            return None

        if not current_context:
            return self.context_name

        if current_context == self.context_name:
            return self.context_name

        socket_uri = self.get_current_docker_socket(current_context)
        if not socket_uri.startswith(UNIX_SCHEME):
            # e.g. tcp://; assume it works
            return current_context

        socket_path = socket_uri[len(UNIX_SCHEME):]
        try:
            if stat.S_ISSOCK(os.stat(socket_path).st_mode):
                return current_context
            logger.info('Invalid existing context "%s": %s is not a socket; overriding context.',
                        current_context, socket_uri)
        except OSError as ex:
            logger.info('Could not read existing docker socket %s, overriding context "%s": %s',
                        socket_uri, current_context, ex)

        return self.context_name

    def cred_helper_working(self, helper_name: str) -> bool:
        """Whether docker-credential-<helper_name> runs and exits cleanly"""
        return self.checker.is_working(helper_name)

    def get_default_docker_creds_store(self) -> str:
        """Native credential store name for this platform; raises UnsupportedPlatformError"""
        return self.checker.default_store_name()

    def ensure_docker_context(self, socket_path: str, kubernetes_endpoint: Optional[str] = None):
        """Write our docker context, pointing at socket_path (and the k8s endpoint if given)"""
        context = ContextMetadata(
            name=self.context_name,
            description=CONTEXT_DESCRIPTION,
            endpoints={
                'docker': Endpoint(host=f"{UNIX_SCHEME}{socket_path}", skip_tls_verify=False),
            },
        )
        if kubernetes_endpoint:
            context.endpoints['kubernetes'] = Endpoint(
                host=kubernetes_endpoint,
                skip_tls_verify=True,
                default_namespace='default',
            )
        self.context_storage.write_own_context(context)

    def clear_docker_context(self) -> List[Exception]:
        """Remove our docker context; used for factory reset.

        Never raises. Returns the errors that were logged and ignored.
        """
        return best_effort(
            "clearing docker context",
            self.context_storage.remove_own_context,
            self._unset_own_current_context,
        )

    def _unset_own_current_context(self):
        config = self.config_storage.read()
        if config.current_context != self.context_name:
            return
        config.current_context = None
        self.config_storage.write(config)

    def ensure_docker_config(self, owns_default_socket: bool, socket_path: Optional[str] = None,
                             kubernetes_endpoint: Optional[str] = None) -> bool:
        """Bring config.json and our context in line; returns True if config.json was written"""
        current_config = self.config_storage.read()
        logger.info("Read existing docker config: %s", current_config.to_dict())
        new_config = current_config.copy()

        if platform.system() in UNIX_CONTEXT_PLATFORMS and socket_path:
            self.ensure_docker_context(socket_path, kubernetes_endpoint)

        new_config.current_context = self.get_desired_docker_context(
            owns_default_socket, current_config.current_context)

        # make sure the credential store actually works
        if not new_config.creds_store:
            new_config.creds_store = self.get_default_docker_creds_store()
        elif new_config.creds_store == BROKEN_HELPER_NAME and not self.cred_helper_working(new_config.creds_store):
            new_config.creds_store = self.get_default_docker_creds_store()

        if new_config == current_config:
            logger.info("Docker config not modified")
            return False

        logger.info("Writing modified docker config: %s", new_config.to_dict())
        self.config_storage.write(new_config)
        return True
