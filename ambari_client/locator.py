"""Resolution of logical resources to their canonical API endpoints."""

from typing import Any
from urllib.parse import quote

from ambari_client.exceptions import RemoteError, ValidationError
from ambari_client.logging_config import get_logger
from ambari_client.models.resource import Resource, ResourceKind
from ambari_client.transport import AmbariTransport

logger = get_logger(__name__)

# Paths relative to the API root; the cluster name is always the first identifier.
RESOURCE_PATHS = {
    ResourceKind.CLUSTER: "clusters/{}",
    ResourceKind.HOST: "clusters/{}/hosts/{}/",
    ResourceKind.SERVICE: "clusters/{}/services/{}",
    ResourceKind.SERVICE_COMPONENT: "clusters/{}/services/{}/components/{}/",
    ResourceKind.HOST_COMPONENT: "clusters/{}/hosts/{}/host_components/{}",
}

COLLECTION_PATHS = {
    "clusters": "clusters/",
    "hosts": "clusters/{}/hosts/",
    "services": "clusters/{}/services/",
    "service_components": "clusters/{}/services/{}/components/",
    "host_components": "clusters/{}/hosts/{}/host_components/",
}


def build_path(template: str, *ids: str) -> str:
    """Fill a path template, quoting each identifier as a single path segment."""
    expected = template.count("{}")
    if len(ids) != expected:
        raise ValidationError(f"Path '{template}' needs {expected} identifier(s), got {len(ids)}")
    for value in ids:
        if not value or not str(value).strip():
            raise ValidationError("Resource identifiers cannot be empty")
    return template.format(*(quote(str(value), safe="") for value in ids))


def resource_kind(kind: ResourceKind | str) -> ResourceKind:
    """Accept a kind by value (``"service"``) or by name (``"SERVICE"``)."""
    try:
        return ResourceKind(kind)
    except ValueError:
        pass
    try:
        return ResourceKind[str(kind).upper()]
    except KeyError:
        raise ValidationError(
            f"Unknown resource kind '{kind}'",
            f"Expected one of: {', '.join(k.name for k in ResourceKind)}",
        )


class ResourceLocator:
    """Looks resources up on the server and returns their self links.

    Every call performs a fresh GET. Links are never remembered between calls
    because the server does not promise they stay the same.
    """

    def __init__(self, transport: AmbariTransport):
        self.transport = transport

    def fetch(self, kind: ResourceKind, cluster: str, *ids: str) -> dict[str, Any]:
        """Return the attribute document of a single resource."""
        path = build_path(RESOURCE_PATHS[kind], cluster, *ids)
        return self.transport.get(self.transport.url_for(path))

    def locate(self, cluster: str, kind: ResourceKind | str, *ids: str) -> Resource:
        """Resolve a resource to its endpoint and attributes.

        Args:
            cluster: Cluster name
            kind: Kind of resource to resolve
            ids: Remaining identifiers (host, service, component) in path order

        Raises:
            NotFoundError: If the resource does not exist
            RemoteError: If the lookup fails or the body carries no self link
            ValidationError: If the identifiers do not match the kind
        """
        kind = resource_kind(kind)
        attributes = self.fetch(kind, cluster, *ids)

        endpoint = attributes.get("href")
        if not endpoint:
            raise RemoteError(
                f"No self link returned for {kind.value} {'/'.join((cluster, *ids))}",
                "The management API response did not include an 'href' field",
            )
        logger.debug(f"Located {kind.value} {'/'.join((cluster, *ids))} at {endpoint}")
        return Resource(kind=kind, endpoint=endpoint, attributes=attributes)

    def collection(self, name: str, *ids: str) -> list[dict[str, Any]]:
        """Return the ``items`` of a collection endpoint, empty when absent."""
        path = build_path(COLLECTION_PATHS[name], *ids)
        body = self.transport.get(self.transport.url_for(path))
        return list(body.get("items") or [])


def extract_names(items: list[dict[str, Any]], wrapper: str, field: str) -> list[str]:
    """Pull one identifier out of each typed wrapper object, keeping server order."""
    try:
        return [item[wrapper][field] for item in items]
    except (KeyError, TypeError) as e:
        raise RemoteError(
            f"Unexpected item layout in collection response (missing {wrapper}.{field})",
            str(e),
        )
