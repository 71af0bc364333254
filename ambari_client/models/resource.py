"""Remote resources, operation outcomes and the uniform result wrapper."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from ambari_client.exceptions import AmbariClientError

T = TypeVar("T")


class ResourceKind(str, Enum):
    """Kinds of resource the locator can resolve."""

    CLUSTER = "cluster"
    HOST = "host"
    SERVICE = "service"
    SERVICE_COMPONENT = "service_component"
    HOST_COMPONENT = "host_component"


class Resource(BaseModel):
    """A located remote resource.

    ``endpoint`` is the server's own ``href`` for the resource and is used
    verbatim for any mutation. It is not guaranteed stable, so locate again
    rather than keeping one around.
    """

    kind: ResourceKind
    endpoint: str
    attributes: dict[str, Any] = Field(default_factory=dict)


class ServiceProvisioning(BaseModel):
    """Outcome of adding a service to a cluster."""

    service: str
    already_present: bool = False
    created_components: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or client error, returned by every client operation."""

    value: T | None = None
    error: AmbariClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AmbariClientError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, raising the captured error on failure."""
        if self.error is not None:
            raise self.error
        return self.value
