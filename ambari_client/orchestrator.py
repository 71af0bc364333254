"""Multi-step lifecycle operations: adding and removing services, components and hosts.

None of these sequences is atomic. When a step fails, the steps before it stay
applied on the server and nothing is rolled back; callers retry or clean up.
"""

from ambari_client.driver import StateTransitionDriver
from ambari_client.exceptions import (
    ConfigurationError,
    ProvisioningError,
    RemoteError,
    TransportError,
)
from ambari_client.locator import ResourceLocator, build_path, extract_names
from ambari_client.logging_config import get_logger
from ambari_client.models.config import ServiceComponentsTable
from ambari_client.models.request import RequestReceipt
from ambari_client.models.resource import ResourceKind, ServiceProvisioning
from ambari_client.transport import AmbariTransport

logger = get_logger(__name__)


class LifecycleOrchestrator:
    """Sequences create, install and delete requests against the server."""

    def __init__(
        self,
        transport: AmbariTransport,
        locator: ResourceLocator,
        driver: StateTransitionDriver,
        components: ServiceComponentsTable | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            transport: HTTP transport
            locator: Resource locator
            driver: State transition driver
            components: Service-to-components table used by add_service
        """
        self.transport = transport
        self.locator = locator
        self.driver = driver
        self.components = components

    def service_names(self, cluster: str) -> list[str]:
        items = self.locator.collection("services", cluster)
        return extract_names(items, "ServiceInfo", "service_name")

    def host_names(self, cluster: str) -> list[str]:
        items = self.locator.collection("hosts", cluster)
        return extract_names(items, "Hosts", "host_name")

    def add_service(self, cluster: str, service: str) -> ServiceProvisioning:
        """Create a service and each of its components.

        Does nothing when the service is already present in the cluster.

        Raises:
            ConfigurationError: If no component list is known for the service
            ProvisioningError: If a component could not be created; already
                created components are listed on the error and left in place
            RemoteError: If the service itself could not be created
        """
        if service in self.service_names(cluster):
            logger.info(f"Service {service} already present in cluster {cluster}")
            return ServiceProvisioning(service=service, already_present=True)

        if self.components is None:
            raise ConfigurationError(
                "No service components table configured",
                "Load one with ServiceComponentsTable.load() and pass it to the client",
            )
        component_names = self.components.components_for(service)

        self.transport.post(
            self.transport.url_for(build_path("clusters/{}/services/{}", cluster, service))
        )
        logger.info(f"Created service {service} in cluster {cluster}")

        created: list[str] = []
        for component in component_names:
            try:
                self.add_service_component(cluster, service, component)
            except (RemoteError, TransportError) as e:
                logger.error(
                    f"Adding service {service} stopped at component {component}; "
                    f"left in place: {', '.join(created) or 'no components'}"
                )
                raise ProvisioningError(
                    f"Failed to create component {component} of service {service}",
                    e.details or e.message,
                    created_components=created,
                    cause=e,
                )
            created.append(component)

        return ServiceProvisioning(service=service, created_components=created)

    def add_service_component(self, cluster: str, service: str, component: str) -> RequestReceipt:
        """Create a component under a service; the server marks it install-pending."""
        path = build_path("clusters/{}/services/{}/components/{}", cluster, service, component)
        receipt = self.transport.post(self.transport.url_for(path))
        logger.info(f"Created component {component} of service {service}")
        return receipt

    def add_component(self, cluster: str, host: str, component: str) -> RequestReceipt:
        """Place a component on a host and install it.

        A freshly created host-component waits in a pending state until it is
        explicitly moved to INSTALLED, so the create is always followed by one
        install transition.
        """
        host_resource = self.locator.locate(cluster, ResourceKind.HOST, host)
        url = host_resource.endpoint.rstrip("/") + "/" + build_path("host_components/{}", component)

        self.transport.post(url)
        logger.info(f"Created component {component} on host {host}")
        return self.driver.stop_component(cluster, host, component)

    def add_host(self, cluster: str, host: str) -> RequestReceipt | None:
        """Register a host with the cluster; returns None if it is already there."""
        if host in self.host_names(cluster):
            logger.info(f"Host {host} already present in cluster {cluster}")
            return None

        receipt = self.transport.post(
            self.transport.url_for(build_path("clusters/{}/hosts/{}", cluster, host))
        )
        logger.info(f"Added host {host} to cluster {cluster}")
        return receipt

    def remove_service(self, cluster: str, service: str) -> RequestReceipt:
        """Delete a service. The server refuses while its components run."""
        resource = self.locator.locate(cluster, ResourceKind.SERVICE, service)
        return self.transport.delete(resource.endpoint)

    def remove_component(self, cluster: str, host: str, component: str) -> RequestReceipt:
        """Delete a component from a host."""
        resource = self.locator.locate(cluster, ResourceKind.HOST_COMPONENT, host, component)
        return self.transport.delete(resource.endpoint)

    def remove_host(self, cluster: str, host: str) -> RequestReceipt:
        """Delete a host from the cluster."""
        resource = self.locator.locate(cluster, ResourceKind.HOST, host)
        return self.transport.delete(resource.endpoint)
