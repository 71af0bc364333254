"""State transitions for services and host-components."""

from ambari_client.exceptions import ValidationError
from ambari_client.locator import ResourceLocator
from ambari_client.logging_config import get_logger
from ambari_client.models.request import RequestEnvelope, RequestReceipt
from ambari_client.models.resource import ResourceKind
from ambari_client.models.state import State
from ambari_client.transport import AmbariTransport

logger = get_logger(__name__)


class StateTransitionDriver:
    """Moves services and host-components between lifecycle states.

    The server runs transitions in the background; the driver returns the
    receipt of the accepted request and does not wait for it.
    """

    def __init__(self, transport: AmbariTransport, locator: ResourceLocator):
        self.transport = transport
        self.locator = locator

    def set_service_state(self, cluster: str, service: str, state: State | str) -> RequestReceipt:
        """Move a service to ``state``.

        Raises:
            ValidationError: If the target state cannot be requested
            NotFoundError: If the service does not exist
            RemoteError: If the server rejects the change
        """
        envelope = self._envelope(RequestEnvelope.for_service, cluster, service, state)
        resource = self.locator.locate(cluster, ResourceKind.SERVICE, service)

        logger.info(f"{envelope.context} in cluster {cluster}")
        return self.transport.put(resource.endpoint, envelope.to_payload())

    def set_host_component_state(
        self, cluster: str, host: str, component: str, state: State | str
    ) -> RequestReceipt:
        """Move one component on one host to ``state``.

        Raises:
            ValidationError: If the target state cannot be requested
            NotFoundError: If the host-component does not exist
            RemoteError: If the server rejects the change
        """
        envelope = self._envelope(
            RequestEnvelope.for_host_component, cluster, host, component, state
        )
        resource = self.locator.locate(cluster, ResourceKind.HOST_COMPONENT, host, component)

        logger.info(f"{envelope.context} on {host} in cluster {cluster}")
        return self.transport.put(resource.endpoint, envelope.to_payload())

    def start_service(self, cluster: str, service: str) -> RequestReceipt:
        return self.set_service_state(cluster, service, State.STARTED)

    def stop_service(self, cluster: str, service: str) -> RequestReceipt:
        return self.set_service_state(cluster, service, State.STOPPED)

    def start_component(self, cluster: str, host: str, component: str) -> RequestReceipt:
        return self.set_host_component_state(cluster, host, component, State.STARTED)

    def stop_component(self, cluster: str, host: str, component: str) -> RequestReceipt:
        return self.set_host_component_state(cluster, host, component, State.STOPPED)

    @staticmethod
    def _envelope(builder, *args) -> RequestEnvelope:
        try:
            return builder(*args)
        except ValueError as e:
            raise ValidationError("Invalid state change request", str(e))
