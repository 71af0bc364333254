"""Facade over the Ambari management API.

Every public operation returns a :class:`~ambari_client.models.Result`: reads
and writes alike either succeed with a value or fail with an
:class:`~ambari_client.exceptions.AmbariClientError`. Nothing is cached; each
call goes back to the server.
"""

from typing import Any, Callable

import requests

from ambari_client.driver import StateTransitionDriver
from ambari_client.exceptions import AmbariClientError, RemoteError
from ambari_client.locator import ResourceLocator, extract_names
from ambari_client.logging_config import get_logger
from ambari_client.models.config import ClientConfig, ServiceComponentsTable
from ambari_client.models.request import RequestReceipt
from ambari_client.models.resource import Resource, ResourceKind, Result, ServiceProvisioning
from ambari_client.models.state import State
from ambari_client.orchestrator import LifecycleOrchestrator
from ambari_client.transport import AmbariTransport

logger = get_logger(__name__)


class ClusterStateClient:
    """Enumerates and drives the lifecycle of Ambari-managed resources."""

    def __init__(
        self,
        config: ClientConfig,
        components: ServiceComponentsTable | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            config: Connection settings
            components: Service-to-components table, needed only by add_service
            session: Optional pre-built HTTP session
        """
        self.config = config
        self.transport = AmbariTransport(config, session=session)
        self.locator = ResourceLocator(self.transport)
        self.driver = StateTransitionDriver(self.transport, self.locator)
        self.orchestrator = LifecycleOrchestrator(
            self.transport, self.locator, self.driver, components
        )

    def close(self) -> None:
        self.transport.session.close()

    def __enter__(self) -> "ClusterStateClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _call(self, description: str, operation: Callable[..., Any], *args: Any) -> Result:
        try:
            return Result.success(operation(*args))
        except AmbariClientError as e:
            logger.debug(f"{description} failed: {e.message}")
            return Result.failure(e)

    def _names(self, collection: str, wrapper: str, field: str, *ids: str) -> list[str]:
        return extract_names(self.locator.collection(collection, *ids), wrapper, field)

    def _state(self, kind: ResourceKind, wrapper: str, cluster: str, *ids: str) -> State:
        attributes = self.locator.fetch(kind, cluster, *ids)
        try:
            return State.from_remote(attributes[wrapper]["state"])
        except (KeyError, TypeError):
            raise RemoteError(f"No {wrapper}.state in {kind.value} response")

    # Resource location

    def locate(self, cluster: str, kind: ResourceKind | str, *ids: str) -> Result[Resource]:
        """Resolve a resource to its current endpoint and attributes."""
        return self._call("locate", self.locator.locate, cluster, kind, *ids)

    # Read accessors

    def clusters(self) -> Result[list[str]]:
        """Names of the clusters this server manages."""
        return self._call("clusters", self._names, "clusters", "Clusters", "cluster_name")

    def cluster(self, cluster: str) -> Result[dict]:
        return self._call("cluster", self.locator.fetch, ResourceKind.CLUSTER, cluster)

    def hosts(self, cluster: str) -> Result[list[str]]:
        return self._call("hosts", self._names, "hosts", "Hosts", "host_name", cluster)

    def host(self, cluster: str, host: str) -> Result[dict]:
        return self._call("host", self.locator.fetch, ResourceKind.HOST, cluster, host)

    def services(self, cluster: str) -> Result[list[str]]:
        return self._call(
            "services", self._names, "services", "ServiceInfo", "service_name", cluster
        )

    def service(self, cluster: str, service: str) -> Result[dict]:
        return self._call("service", self.locator.fetch, ResourceKind.SERVICE, cluster, service)

    def service_components(self, cluster: str, service: str) -> Result[list[str]]:
        return self._call(
            "service_components",
            self._names,
            "service_components",
            "ServiceComponentInfo",
            "component_name",
            cluster,
            service,
        )

    def service_component(self, cluster: str, service: str, component: str) -> Result[dict]:
        return self._call(
            "service_component",
            self.locator.fetch,
            ResourceKind.SERVICE_COMPONENT,
            cluster,
            service,
            component,
        )

    def host_components(self, cluster: str, host: str) -> Result[list[str]]:
        """Names of the components placed on a host."""
        return self._call(
            "host_components",
            self._names,
            "host_components",
            "HostRoles",
            "component_name",
            cluster,
            host,
        )

    def host_component(self, cluster: str, host: str, component: str) -> Result[dict]:
        return self._call(
            "host_component",
            self.locator.fetch,
            ResourceKind.HOST_COMPONENT,
            cluster,
            host,
            component,
        )

    def service_state(self, cluster: str, service: str) -> Result[State]:
        """Current lifecycle state of a service as reported by the server."""
        return self._call(
            "service_state", self._state, ResourceKind.SERVICE, "ServiceInfo", cluster, service
        )

    def host_component_state(self, cluster: str, host: str, component: str) -> Result[State]:
        """Current lifecycle state of a component on a host."""
        return self._call(
            "host_component_state",
            self._state,
            ResourceKind.HOST_COMPONENT,
            "HostRoles",
            cluster,
            host,
            component,
        )

    # State transitions

    def set_service_state(
        self, cluster: str, service: str, state: State | str
    ) -> Result[RequestReceipt]:
        return self._call(
            "set_service_state", self.driver.set_service_state, cluster, service, state
        )

    def set_host_component_state(
        self, cluster: str, host: str, component: str, state: State | str
    ) -> Result[RequestReceipt]:
        return self._call(
            "set_host_component_state",
            self.driver.set_host_component_state,
            cluster,
            host,
            component,
            state,
        )

    def start_service(self, cluster: str, service: str) -> Result[RequestReceipt]:
        return self._call("start_service", self.driver.start_service, cluster, service)

    def stop_service(self, cluster: str, service: str) -> Result[RequestReceipt]:
        """Stop a service, which in Ambari terms means returning it to INSTALLED."""
        return self._call("stop_service", self.driver.stop_service, cluster, service)

    def start_component(self, cluster: str, host: str, component: str) -> Result[RequestReceipt]:
        return self._call("start_component", self.driver.start_component, cluster, host, component)

    def stop_component(self, cluster: str, host: str, component: str) -> Result[RequestReceipt]:
        return self._call("stop_component", self.driver.stop_component, cluster, host, component)

    # Lifecycle

    def add_service(self, cluster: str, service: str) -> Result[ServiceProvisioning]:
        """Create a service and its components; a no-op if it already exists."""
        return self._call("add_service", self.orchestrator.add_service, cluster, service)

    def add_service_component(
        self, cluster: str, service: str, component: str
    ) -> Result[RequestReceipt]:
        return self._call(
            "add_service_component",
            self.orchestrator.add_service_component,
            cluster,
            service,
            component,
        )

    def add_component(self, cluster: str, host: str, component: str) -> Result[RequestReceipt]:
        """Place a component on a host and move it to INSTALLED."""
        return self._call(
            "add_component", self.orchestrator.add_component, cluster, host, component
        )

    def add_host(self, cluster: str, host: str) -> Result[RequestReceipt | None]:
        return self._call("add_host", self.orchestrator.add_host, cluster, host)

    def remove_service(self, cluster: str, service: str) -> Result[RequestReceipt]:
        return self._call("remove_service", self.orchestrator.remove_service, cluster, service)

    def remove_component(self, cluster: str, host: str, component: str) -> Result[RequestReceipt]:
        return self._call(
            "remove_component", self.orchestrator.remove_component, cluster, host, component
        )

    def remove_host(self, cluster: str, host: str) -> Result[RequestReceipt]:
        return self._call("remove_host", self.orchestrator.remove_host, cluster, host)
