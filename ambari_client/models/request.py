"""State-change request envelopes and the receipts the server sends back."""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ambari_client.models.state import TARGET_STATES, OperationLevel, State


class RequestEnvelope(BaseModel):
    """Typed body of a service or host-component state change."""

    level: OperationLevel
    cluster_name: str
    state: State
    context: str
    host_names: str | None = None

    @field_validator("cluster_name", "context")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate required text fields are not empty."""
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v

    @field_validator("state")
    @classmethod
    def validate_target_state(cls, v: State) -> State:
        """Validate the state is one a caller may ask the server for."""
        if v not in TARGET_STATES:
            allowed = sorted(s.value for s in TARGET_STATES)
            raise ValueError(f"state must be one of {allowed}, got {v.value}")
        return v

    @model_validator(mode="after")
    def validate_host_names(self) -> "RequestEnvelope":
        """HOST_COMPONENT requests name a host; SERVICE requests must not."""
        if self.level is OperationLevel.HOST_COMPONENT and not self.host_names:
            raise ValueError("host_names is required for HOST_COMPONENT requests")
        if self.level is OperationLevel.SERVICE and self.host_names:
            raise ValueError("host_names is not allowed for SERVICE requests")
        return self

    @classmethod
    def for_service(cls, cluster: str, service: str, state: State | str) -> "RequestEnvelope":
        """Build the envelope moving a whole service to ``state``."""
        state = State(state)
        return cls(
            level=OperationLevel.SERVICE,
            cluster_name=cluster,
            state=state,
            context=f"Service {service} transition to {state.value.lower()}",
        )

    @classmethod
    def for_host_component(
        cls, cluster: str, host: str, component: str, state: State | str
    ) -> "RequestEnvelope":
        """Build the envelope moving one component on one host to ``state``."""
        state = State(state)
        return cls(
            level=OperationLevel.HOST_COMPONENT,
            cluster_name=cluster,
            host_names=host,
            state=state,
            context=f"Component {component} transition to {state.value.lower()}",
        )

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body the management API expects."""
        operation_level: dict[str, Any] = {
            "level": self.level.value,
            "cluster_name": self.cluster_name,
        }
        if self.level is OperationLevel.HOST_COMPONENT:
            operation_level["host_names"] = self.host_names
            state_key = "HostRoles"
        else:
            state_key = "ServiceInfo"

        return {
            "RequestInfo": {"operation_level": operation_level, "context": self.context},
            state_key: {"state": self.state.value},
        }


class RequestReceipt(BaseModel):
    """Server acknowledgement of a mutating request.

    Ambari answers state changes asynchronously with ``202 Accepted`` and a
    reference to the background request; a change to the state a resource is
    already in comes back as ``200`` with an empty body. The receipt is
    returned as-is; nothing here waits for the background request to finish.
    """

    status_code: int
    href: str | None = None
    request_id: int | None = None
    status: str | None = None
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        """True when the server queued a background request."""
        return self.request_id is not None

    @classmethod
    def from_response(cls, status_code: int, body: dict[str, Any] | None) -> "RequestReceipt":
        body = body or {}
        request_info = body.get("Requests") or {}
        return cls(
            status_code=status_code,
            href=body.get("href"),
            request_id=request_info.get("id"),
            status=request_info.get("status"),
            body=body,
        )
