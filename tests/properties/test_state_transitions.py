"""Property-based tests for service and host-component state transitions.

Covers the envelope each transition sends, where it is sent, and the
stop/start mapping onto INSTALLED/STARTED.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ambari_client.models.request import RequestEnvelope
from ambari_client.models.state import OperationLevel, State

service_names = st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ_0123456789", min_size=1, max_size=16)
cluster_names = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789_-", min_size=1, max_size=12)


@st.composite
def valid_hostname(draw):
    """Generate valid RFC 1123 hostnames."""
    num_labels = draw(st.integers(min_value=1, max_value=3))
    labels = []
    for _ in range(num_labels):
        length = draw(st.integers(min_value=1, max_value=10))
        start = draw(st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789"))
        if length == 1:
            labels.append(start)
            continue
        middle = "".join(
            draw(
                st.lists(
                    st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789-"),
                    min_size=length - 2,
                    max_size=length - 2,
                )
            )
        )
        end = draw(st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789"))
        labels.append(start + middle + end)
    return ".".join(labels)


target_states = st.sampled_from([State.INSTALLED, State.STARTED, State.STOPPED])


@given(cluster=cluster_names, service=service_names, state=target_states)
def test_set_service_state_sends_one_put_to_resolved_endpoint(make_client, cluster, service, state):
    """
    For any existing service, setting its state issues exactly one PUT to the
    service's resolved self link, with ServiceInfo.state equal to the target
    and a context naming the lower-cased state.
    """
    client, fake = make_client()
    href = fake.service(cluster, service)

    result = client.set_service_state(cluster, service, state)

    assert result.ok
    puts = fake.of("PUT")
    assert len(puts) == 1
    assert puts[0].url == href
    assert puts[0].payload["ServiceInfo"]["state"] == state.value
    assert state.value.lower() in puts[0].payload["RequestInfo"]["context"]
    assert puts[0].payload["RequestInfo"]["operation_level"] == {
        "level": "SERVICE",
        "cluster_name": cluster,
    }


@given(
    cluster=cluster_names,
    host=valid_hostname(),
    component=service_names,
    state=target_states,
)
def test_host_component_envelope_names_level_and_host(make_client, cluster, host, component, state):
    """
    For any (cluster, host, component), the state-change envelope carries
    level HOST_COMPONENT and host_names equal to the host.
    """
    client, fake = make_client()
    href = fake.host_component(cluster, host, component)

    assert client.set_host_component_state(cluster, host, component, state).ok

    (put,) = fake.of("PUT")
    operation_level = put.payload["RequestInfo"]["operation_level"]
    assert put.url == href
    assert operation_level["level"] == "HOST_COMPONENT"
    assert operation_level["host_names"] == host
    assert operation_level["cluster_name"] == cluster
    assert put.payload["HostRoles"] == {"state": state.value}
    assert component in put.payload["RequestInfo"]["context"]


@given(cluster=cluster_names, service=service_names)
def test_stop_then_start_service(make_client, cluster, service):
    """
    Stopping then starting a service issues two PUTs to the same resolved
    endpoint, INSTALLED first and STARTED second. The endpoint is looked up
    again before each PUT.
    """
    client, fake = make_client()
    href = fake.service(cluster, service)

    assert client.stop_service(cluster, service).ok
    assert client.start_service(cluster, service).ok

    puts = fake.of("PUT")
    assert [p.url for p in puts] == [href, href]
    assert [p.payload["ServiceInfo"]["state"] for p in puts] == ["INSTALLED", "STARTED"]
    assert [r.method for r in fake.requests] == ["GET", "PUT", "GET", "PUT"]


@given(cluster=cluster_names, host=valid_hostname(), component=service_names)
def test_stop_then_start_component(make_client, cluster, host, component):
    client, fake = make_client()
    href = fake.host_component(cluster, host, component)

    assert client.stop_component(cluster, host, component).ok
    assert client.start_component(cluster, host, component).ok

    puts = fake.of("PUT")
    assert [p.url for p in puts] == [href, href]
    assert [p.payload["HostRoles"]["state"] for p in puts] == ["INSTALLED", "STARTED"]


def test_stopped_is_an_alias_of_installed():
    """Ambari has no separate stopped state."""
    assert State.STOPPED is State.INSTALLED
    assert State("INSTALLED") is State.STOPPED
    assert "STOPPED" not in [s.name for s in State]


@given(value=st.text(max_size=20))
def test_from_remote_never_raises(value):
    state = State.from_remote(value)
    assert isinstance(state, State)


@given(cluster=cluster_names, service=service_names, state=target_states)
def test_service_envelope_payload_shape(cluster, service, state):
    payload = RequestEnvelope.for_service(cluster, service, state).to_payload()

    assert set(payload) == {"RequestInfo", "ServiceInfo"}
    assert payload["RequestInfo"]["context"] == (
        f"Service {service} transition to {state.value.lower()}"
    )
    assert "host_names" not in payload["RequestInfo"]["operation_level"]


def test_host_component_envelope_requires_host():
    with pytest.raises(ValueError):
        RequestEnvelope(
            level=OperationLevel.HOST_COMPONENT,
            cluster_name="c1",
            state=State.STARTED,
            context="Component DATANODE transition to started",
        )


def test_service_envelope_rejects_host():
    with pytest.raises(ValueError):
        RequestEnvelope(
            level=OperationLevel.SERVICE,
            cluster_name="c1",
            host_names="h1",
            state=State.STARTED,
            context="Service HDFS transition to started",
        )


@pytest.mark.parametrize("state", [State.INIT, State.STARTING, State.UNKNOWN, "BOGUS"])
def test_envelope_rejects_non_target_states(state):
    with pytest.raises(ValueError):
        RequestEnvelope.for_service("c1", "HDFS", state)
