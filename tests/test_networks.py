"""
Tests for the networks API.
"""

import json

import pytest

from unixdock.exceptions import APIError, Conflict, NetworkNotFound, NotFound
from helpers import error_response, json_response, make_response

NETWORK_ID = "22be93d5babb089c5aab8dbc369042fad48ff791584ca2da2100db837a1c7c30"

INSPECT = {
    "Id": NETWORK_ID,
    "Name": "backend",
    "Driver": "bridge",
    "Scope": "local",
    "Containers": {"abc": {"Name": "web"}},
}


class TestNetworks:
    """Tests for NetworkCollection."""

    def test_list(self, client, factory):
        factory.queue(json_response([INSPECT, dict(INSPECT, Id="f" * 64, Name="bridge")]))

        networks = client.networks.list()

        assert [n.name for n in networks] == ["backend", "bridge"]
        assert factory.last.request_line == "GET /networks HTTP/1.1"

    def test_list_filters(self, client, factory):
        factory.queue(json_response([]))

        client.networks.list(filters={"name": ["backend"]})

        assert json.loads(factory.last.params["filters"]) == {"name": ["backend"]}

    def test_get(self, client, factory):
        factory.queue(json_response(INSPECT))

        network = client.networks.get("backend")

        assert network.id == NETWORK_ID
        assert network.containers == ["abc"]
        assert factory.last.query == ""

    def test_get_verbose_scope(self, client, factory):
        factory.queue(json_response(INSPECT))

        client.networks.get("backend", verbose=True, scope="local")

        assert factory.last.params == {"verbose": "true", "scope": "local"}

    def test_get_missing(self, client, factory):
        factory.queue(error_response(404, "network nope not found"))

        with pytest.raises(NetworkNotFound):
            client.networks.get("nope")

    def test_create(self, client, factory):
        factory.queue(
            json_response({"Id": NETWORK_ID, "Warning": ""}, status=201, reason="Created"),
            json_response(INSPECT),
        )

        network = client.networks.create("backend", internal=True, labels={"env": "test"})

        body = factory.requests[0].json()
        assert body == {
            "Name": "backend",
            "Driver": "bridge",
            "Internal": True,
            "Attachable": True,
            "CheckDuplicate": True,
            "Labels": {"env": "test"},
        }
        assert network.name == "backend"

    def test_create_conflict(self, client, factory):
        factory.queue(error_response(409, "network with name backend already exists"))

        with pytest.raises(Conflict):
            client.networks.create("backend")

    def test_create_missing_plugin(self, client, factory):
        factory.queue(error_response(404, "plugin not found"))

        with pytest.raises(NotFound) as exc_info:
            client.networks.create("backend", driver="weird")

        assert not isinstance(exc_info.value, NetworkNotFound)

    def test_create_predefined(self, client, factory):
        factory.queue(error_response(403, "operation not supported for pre-defined networks"))

        with pytest.raises(APIError) as exc_info:
            client.networks.create("bridge")

        assert exc_info.value.status_code == 403

    def test_remove(self, client, factory):
        factory.queue(make_response(204, reason="No Content"))

        client.networks.remove("backend")

        assert factory.last.request_line == "DELETE /networks/backend HTTP/1.1"

    def test_connect(self, client, factory):
        factory.queue(make_response(200))

        client.networks.connect("backend", "web", endpoint_config={"Aliases": ["www"]})

        assert factory.last.path == "/networks/backend/connect"
        assert factory.last.json() == {"Container": "web", "EndpointConfig": {"Aliases": ["www"]}}

    def test_disconnect(self, client, factory):
        factory.queue(make_response(200))

        client.networks.disconnect("backend", "web", force=True)

        assert factory.last.json() == {"Container": "web", "Force": True}

    def test_prune(self, client, factory):
        factory.queue(json_response({"NetworksDeleted": ["old"]}))

        result = client.networks.prune(filters={"until": ["24h"]})

        assert result == {"NetworksDeleted": ["old"]}
        assert factory.last.method == "POST"
        assert "filters" in factory.last.params


class TestNetworkObject:
    """Network objects delegate to the collection."""

    def test_connect_and_reload(self, client, factory):
        factory.queue(json_response(dict(INSPECT, Containers={})))
        network = client.networks.get("backend")
        assert network.containers == []

        factory.queue(make_response(200), json_response(INSPECT))
        network.connect("web")
        network.reload()

        assert factory.requests[1].json() == {"Container": "web"}
        assert network.containers == ["abc"]

    def test_remove(self, client, factory):
        factory.queue(json_response(INSPECT), make_response(204, reason="No Content"))

        client.networks.get("backend").remove()

        assert factory.last.path == f"/networks/{NETWORK_ID}"
