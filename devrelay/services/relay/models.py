"""Pydantic v2 models for the developer relay control plane."""

from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict, Field


APP_HOST_ROLE = "APP_HOST"
COMPANION_HOST_ROLE = "COMPANION_HOST"


class HostState(str, Enum):
    """Availability reported by the relay for a host."""
    AVAILABLE = "available"
    BUSY = "busy"


class Host(BaseModel):
    """A device or process reachable through the relay."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str
    display_name: str = Field(alias="displayName")
    roles: List[str]
    state: HostState

    def has_role(self, role: str) -> bool:
        return role in self.roles


class HostsResponse(BaseModel):
    """Wire envelope of GET 1/user/-/developer-relay/hosts.json."""
    hosts: List[Host]


class Hosts(BaseModel):
    """Hosts of the current user, bucketed by role.

    A host carrying several roles is listed in every matching bucket.
    """

    model_config = ConfigDict(frozen=True)

    app_host: List[Host] = Field(default_factory=list)
    companion_host: List[Host] = Field(default_factory=list)


def hosts_with_role(hosts: List[Host], role: str) -> List[Host]:
    """Hosts carrying `role`, in server order."""
    return [host for host in hosts if host.has_role(role)]
