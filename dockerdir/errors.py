"""Exceptions raised by dockerdir.

All of them inherit from DockerDirError so callers can catch one type.
"""


class DockerDirError(Exception):
    """Base exception for all dockerdir errors."""
    pass


class DockerConfigError(DockerDirError):
    """Raised when docker's config.json holds something other than a JSON object."""

    def __init__(self, config_path, reason: str):
        super().__init__(f"Invalid docker config {config_path}: {reason}")
        self.config_path = config_path
        self.reason = reason


class UnsupportedPlatformError(DockerDirError):
    """Raised when there is no known credential store for the running platform."""

    def __init__(self, platform: str):
        super().__init__(f'platform "{platform}" is not supported')
        self.platform = platform
