"""Pytest configuration and shared fixtures."""

import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests
from hypothesis import Verbosity, settings

from ambari_client.client import ClusterStateClient
from ambari_client.models.config import ClientConfig, ServiceComponentsTable

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile("default")

API_ROOT = "http://ambari.test:8080/api/v1/"
# The server hands out self links on its own internal name
HREF_ROOT = "http://ambari-internal.test:8080/api/v1/"


@dataclass
class RecordedRequest:
    method: str
    url: str
    kwargs: dict[str, Any] = field(default_factory=dict)

    @property
    def payload(self) -> dict | None:
        return self.kwargs.get("json")

    @property
    def headers(self) -> dict:
        return self.kwargs.get("headers") or {}


def make_response(status: int, body: Any = None, url: str | None = None) -> requests.Response:
    """Build a real requests.Response with a JSON (or raw text) body."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    if body is None:
        response._content = b""
    elif isinstance(body, str):
        response._content = body.encode()
    else:
        response._content = json.dumps(body).encode()
        response.headers["Content-Type"] = "application/json"
    return response


class FakeAmbariSession:
    """Stand-in for requests.Session that records requests and replays canned answers.

    Unregistered GETs answer 404; unregistered POST/PUT/DELETE answer
    202 Accepted with an increasing request id.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list] = {}
        self.requests: list[RecordedRequest] = []
        self.auth = None
        self.verify = True
        self.closed = False
        self._next_request_id = 1

    def add(self, method: str, url: str, body: Any = None, status: int = 200) -> None:
        self.routes.setdefault((method, url), []).append((status, body, None))

    def fail(self, method: str, url: str, error: Exception) -> None:
        self.routes.setdefault((method, url), []).append((None, None, error))

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.requests.append(RecordedRequest(method, url, kwargs))

        outcomes = self.routes.get((method, url))
        if outcomes:
            status, body, error = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
            if error is not None:
                raise error
            return make_response(status, body, url)

        if method == "GET":
            return make_response(404, {"status": 404, "message": f"{url} doesn't exist"}, url)

        request_id = self._next_request_id
        self._next_request_id += 1
        return make_response(
            202,
            {
                "href": f"{HREF_ROOT}clusters/c1/requests/{request_id}",
                "Requests": {"id": request_id, "status": "Accepted"},
            },
            url,
        )

    def close(self) -> None:
        self.closed = True

    @property
    def mutations(self) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method != "GET"]

    def of(self, method: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == method]

    # Canned Ambari resources

    def collection(self, path: str, items: list[dict]) -> None:
        self.add("GET", API_ROOT + path, {"href": HREF_ROOT + path, "items": items})

    def service(self, cluster: str, service: str, state: str = "INSTALLED") -> str:
        href = f"{HREF_ROOT}clusters/{cluster}/services/{service}"
        self.add(
            "GET",
            f"{API_ROOT}clusters/{cluster}/services/{service}",
            {
                "href": href,
                "ServiceInfo": {"cluster_name": cluster, "service_name": service, "state": state},
            },
        )
        return href

    def host(self, cluster: str, host: str) -> str:
        href = f"{HREF_ROOT}clusters/{cluster}/hosts/{host}"
        self.add(
            "GET",
            f"{API_ROOT}clusters/{cluster}/hosts/{host}/",
            {"href": href, "Hosts": {"cluster_name": cluster, "host_name": host}},
        )
        return href

    def host_component(
        self, cluster: str, host: str, component: str, state: str = "INSTALLED"
    ) -> str:
        href = f"{HREF_ROOT}clusters/{cluster}/hosts/{host}/host_components/{component}"
        self.add(
            "GET",
            f"{API_ROOT}clusters/{cluster}/hosts/{host}/host_components/{component}",
            {
                "href": href,
                "HostRoles": {
                    "cluster_name": cluster,
                    "host_name": host,
                    "component_name": component,
                    "state": state,
                },
            },
        )
        return href

    def services(self, cluster: str, names: list[str]) -> None:
        self.collection(
            f"clusters/{cluster}/services/",
            [{"ServiceInfo": {"cluster_name": cluster, "service_name": n}} for n in names],
        )

    def hosts(self, cluster: str, names: list[str]) -> None:
        self.collection(
            f"clusters/{cluster}/hosts/",
            [{"Hosts": {"cluster_name": cluster, "host_name": n}} for n in names],
        )


def build_config(**overrides) -> ClientConfig:
    settings_ = {
        "host": "ambari.test",
        "port": 8080,
        "user": "admin",
        "password": "secret",
        "timeout": 5.0,
        "read_attempts": 3,
        "retry_backoff": 0,
    }
    settings_.update(overrides)
    return ClientConfig(**settings_)


@pytest.fixture(scope="session")
def make_client():
    """Factory returning a (client, fake server) pair.

    Session scoped so property tests can build a fresh pair per example.
    """

    def factory(components: dict[str, list[str]] | None = None, **config_overrides):
        fake = FakeAmbariSession()
        table = ServiceComponentsTable(service_components=components or {})
        client = ClusterStateClient(build_config(**config_overrides), table, session=fake)
        return client, fake

    return factory


@pytest.fixture
def ambari(make_client):
    """A client wired to a fresh fake server with an HDFS/YARN component table."""
    return make_client(
        components={
            "HDFS": ["NAMENODE", "SECONDARY_NAMENODE", "DATANODE", "HDFS_CLIENT"],
            "YARN": ["RESOURCEMANAGER", "NODEMANAGER", "YARN_CLIENT"],
        }
    )


@pytest.fixture
def components_file(tmp_path):
    """Service components table on disk, in the plain mapping layout."""
    path = tmp_path / "components.yml"
    path.write_text(
        "service_components:\n"
        "  HDFS:\n"
        "    - NAMENODE\n"
        "    - DATANODE\n"
        "  ZOOKEEPER:\n"
        "    - ZOOKEEPER_SERVER\n"
        "    - ZOOKEEPER_CLIENT\n"
    )
    return path
