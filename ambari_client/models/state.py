"""Lifecycle states and request granularity understood by the management API."""

from enum import Enum


class State(str, Enum):
    """Lifecycle state of a service or host-component.

    Ambari has no separate stopped state: a stopped daemon sits in
    ``INSTALLED``. ``STOPPED`` is therefore declared as an alias of
    ``INSTALLED`` (``State.STOPPED is State.INSTALLED``) so callers can say
    what they mean without inventing a state the server would reject.
    """

    INIT = "INIT"
    INSTALLING = "INSTALLING"
    INSTALL_PENDING = "INSTALL_PENDING"
    INSTALL_FAILED = "INSTALL_FAILED"
    INSTALLED = "INSTALLED"
    STARTING = "STARTING"
    STARTED = "STARTED"
    STOPPING = "STOPPING"
    UNKNOWN = "UNKNOWN"

    STOPPED = "INSTALLED"

    @classmethod
    def from_remote(cls, value: str | None) -> "State":
        """Parse a state reported by the server, tolerating values we do not model."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.upper())
        except ValueError:
            return cls.UNKNOWN


# States a caller may request through a state-change envelope.
TARGET_STATES = frozenset({State.INSTALLED, State.STARTED})


class OperationLevel(str, Enum):
    """Granularity of a state-change request."""

    SERVICE = "SERVICE"
    HOST_COMPONENT = "HOST_COMPONENT"
