import logging
import platform
import subprocess
from typing import Optional

from dockerdir.errors import UnsupportedPlatformError

logger = logging.getLogger(__name__)

HELPER_PREFIX = "docker-credential-"
DEFAULT_PROBE_TIMEOUT = 30.0

# platform.system() -> native credential store
DEFAULT_CREDS_STORES = {
    "Windows": "wincred",
    "Darwin": "osxkeychain",
    "Linux": "secretservice",
}


class CredentialHelperChecker:
    """Checks docker credential helpers and picks the platform default store"""

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT):
        self.timeout = timeout

    def is_working(self, helper_name: str) -> bool:
        """Run `docker-credential-<helper_name> list` and report whether it exits 0.

        Only the exit code is looked at; a helper that can't be launched or
        that times out is treated as not working.
        """
        helper_bin = f"{HELPER_PREFIX}{helper_name}"
        try:
            result = subprocess.run(
                [helper_bin, "list"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as ex:
            logger.info('Credential helper "%s" is not functional: %s', helper_bin, ex)
            return False

        if result.returncode != 0:
            logger.info('Credential helper "%s" is not functional (exit code %d)', helper_bin, result.returncode)
            return False
        return True

    def default_store_name(self, system: Optional[str] = None) -> str:
        """Return the native credential store for the platform"""
        system = system or platform.system()
        try:
            return DEFAULT_CREDS_STORES[system]
        except KeyError:
            raise UnsupportedPlatformError(system) from None
