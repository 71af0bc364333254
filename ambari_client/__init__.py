"""Client for driving Ambari-managed cluster lifecycle state."""

__version__ = "0.1.0"

from ambari_client.client import ClusterStateClient  # noqa: E402

__all__ = ["ClusterStateClient", "__version__"]
