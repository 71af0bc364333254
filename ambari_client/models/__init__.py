"""Data models for requests, resources and configuration."""

from ambari_client.models.config import ClientConfig, ServiceComponentsTable
from ambari_client.models.request import RequestEnvelope, RequestReceipt
from ambari_client.models.resource import Resource, ResourceKind, Result, ServiceProvisioning
from ambari_client.models.state import OperationLevel, State

__all__ = [
    "ClientConfig",
    "ServiceComponentsTable",
    "RequestEnvelope",
    "RequestReceipt",
    "Resource",
    "ResourceKind",
    "Result",
    "ServiceProvisioning",
    "OperationLevel",
    "State",
]
