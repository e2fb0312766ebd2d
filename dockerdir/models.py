import copy
from dataclasses import dataclass, field
from typing import Dict, Optional

CONTEXT_NAME = "rancher-desktop"
CONTEXT_DESCRIPTION = "Rancher Desktop moby context"
# sha256 of CONTEXT_NAME; docker names context directories this way
CONTEXT_DIR_NAME = "b547d66a5de60e5f0843aba28283a8875c2ad72e99ba076060ef9ec7c09917c8"
DEFAULT_SOCKET_PATH = "/var/run/docker.sock"
UNIX_SCHEME = "unix://"
DEFAULT_SOCKET = f"{UNIX_SCHEME}{DEFAULT_SOCKET_PATH}"


@dataclass
class DockerConfig:
    """The parts of docker's config.json we care about, plus everything else untouched"""
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Return the mapping that gets written to disk"""
        return self.data

    @classmethod
    def from_dict(cls, data: dict):
        """Create config from the parsed JSON object"""
        return cls(data=data)

    def copy(self) -> "DockerConfig":
        """Deep copy, so edits to the copy never leak into the original"""
        return DockerConfig(data=copy.deepcopy(self.data))

    def _set_or_remove(self, key: str, value):
        if value:
            self.data[key] = value
        else:
            self.data.pop(key, None)

    @property
    def auths(self) -> Dict[str, dict]:
        return self.data.get("auths", {})

    @property
    def cred_helpers(self) -> Dict[str, str]:
        return self.data.get("credHelpers", {})

    @property
    def creds_store(self) -> Optional[str]:
        return self.data.get("credsStore")

    @creds_store.setter
    def creds_store(self, value: Optional[str]):
        self._set_or_remove("credsStore", value)

    @property
    def current_context(self) -> Optional[str]:
        return self.data.get("currentContext")

    @current_context.setter
    def current_context(self, value: Optional[str]):
        self._set_or_remove("currentContext", value)


@dataclass
class Endpoint:
    """A single endpoint (docker or kubernetes) of a docker context"""
    host: str
    skip_tls_verify: bool = False
    default_namespace: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            'Host': self.host,
            'SkipTLSVerify': self.skip_tls_verify,
        }
        if self.default_namespace is not None:
            data['DefaultNamespace'] = self.default_namespace
        return data

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            host=data.get('Host'),
            skip_tls_verify=bool(data.get('SkipTLSVerify', False)),
            default_namespace=data.get('DefaultNamespace'),
        )


@dataclass
class ContextMetadata:
    """Contents of a docker context meta.json file"""
    name: str
    description: Optional[str] = None
    endpoints: Dict[str, Endpoint] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert context to dictionary for JSON serialization"""
        return {
            'Name': self.name,
            'Metadata': {'Description': self.description},
            'Endpoints': {kind: ep.to_dict() for kind, ep in self.endpoints.items()},
        }

    @classmethod
    def from_dict(cls, data: dict):
        """Create context from dictionary (tolerates missing Metadata / Endpoints)"""
        metadata = data.get('Metadata')
        endpoints = data.get('Endpoints')
        if not isinstance(metadata, dict):
            metadata = {}
        if not isinstance(endpoints, dict):
            endpoints = {}
        return cls(
            name=data.get('Name'),
            description=metadata.get('Description'),
            endpoints={
                kind: Endpoint.from_dict(ep)
                for kind, ep in endpoints.items()
                if isinstance(ep, dict)
            },
        )

    @property
    def docker_host(self) -> Optional[str]:
        """Host of the docker endpoint; None when missing or not a string"""
        endpoint = self.endpoints.get('docker')
        if endpoint is None or not isinstance(endpoint.host, str):
            return None
        return endpoint.host
