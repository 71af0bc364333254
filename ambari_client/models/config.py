"""Connection settings and the service-to-components table."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from ambari_client.exceptions import ConfigurationError


class ClientConfig(BaseModel):
    """Connection settings for one Ambari server."""

    host: str
    port: int = 8080
    user: str = "admin"
    password: str = Field(default="admin", repr=False)
    protocol: str = "http"
    timeout: float = 30.0
    read_attempts: int = 3
    retry_backoff: float = 1.0
    verify_ssl: bool = True

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Validate host is a bare hostname, not a URL."""
        if not v:
            raise ValueError("host cannot be empty")
        if "://" in v or "/" in v:
            raise ValueError(f"host '{v}' must be a hostname, not a URL")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {v}")
        return v

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        """Validate user is not empty; it doubles as the X-Requested-By identity."""
        if not v:
            raise ValueError("user cannot be empty")
        return v

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        allowed = ["http", "https"]
        if v.lower() not in allowed:
            raise ValueError(f"protocol must be one of {allowed}, got '{v}'")
        return v.lower()

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be greater than zero")
        return v

    @field_validator("read_attempts")
    @classmethod
    def validate_read_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("read_attempts must be at least 1")
        return v

    @field_validator("retry_backoff")
    @classmethod
    def validate_retry_backoff(cls, v: float) -> float:
        if v < 0:
            raise ValueError("retry_backoff cannot be negative")
        return v

    @property
    def base_url(self) -> str:
        """Root of the v1 management API, always ending in a slash."""
        return f"{self.protocol}://{self.host}:{self.port}/api/v1/"

    def save(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str | Path) -> "ClientConfig":
        """Load configuration from YAML file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(
                f"Client configuration not found: {path}",
                "Create it or pass connection settings on the command line",
            )
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}", str(e))
        if not isinstance(data, dict):
            raise ConfigurationError(f"Client configuration in {path} must be a mapping")
        try:
            return cls(**data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid client configuration in {path}", str(e))


class ServiceComponentsTable(BaseModel):
    """Ordered list of components each service needs when it is added.

    Loaded once by the caller and handed to the client; the client never reads
    the file itself.
    """

    service_components: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("service_components")
    @classmethod
    def validate_component_lists(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        for service, components in v.items():
            if len(set(components)) != len(components):
                raise ValueError(f"service '{service}' lists a component more than once")
        return v

    def components_for(self, service: str) -> list[str]:
        """Components to create for ``service``, in table order.

        Raises:
            ConfigurationError: If the table has no entry for the service
        """
        try:
            return list(self.service_components[service])
        except KeyError:
            known = ", ".join(sorted(self.service_components)) or "none"
            raise ConfigurationError(
                f"No component list configured for service '{service}'",
                f"Known services: {known}",
            )

    @classmethod
    def load(cls, path: str | Path) -> "ServiceComponentsTable":
        """Load the table from YAML.

        Accepts either a mapping with a ``service_components`` key or the
        older layout where that mapping is the first entry of a list.

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Service components file not found: {path}")
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}", str(e))

        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or "service_components" not in data:
            raise ConfigurationError(
                f"Service components file {path} has no 'service_components' mapping",
                "Expected:\n  service_components:\n    HDFS: [NAMENODE, DATANODE]",
            )
        try:
            return cls(service_components=data["service_components"] or {})
        except ValueError as e:
            raise ConfigurationError(f"Invalid service components in {path}", str(e))
