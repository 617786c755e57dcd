import json

import pytest
from fastapi.testclient import TestClient

from app import main
from app.errors import CacheError
from app.schemas import AdviceReply
from app.service import AdviceService

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class FakeService:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def give_me_advice(self, args):
        self.calls.append(args)
        if self.error:
            raise self.error
        if args.amount is not None and args.amount < 0:
            raise AssertionError("negative amount must be rejected by the real service")
        advices = ["a", "b", "c"]
        if args.amount is not None:
            advices = advices[: args.amount]
        return AdviceReply(advice_list=advices)


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def client(monkeypatch, service):
    monkeypatch.setattr(main, "build_service", lambda http_client, store: service)
    with TestClient(main.app) as test_client:
        yield test_client


def call(client, payload, headers=JSON_HEADERS):
    return client.post("/rpc", content=json.dumps(payload), headers=headers)


def request(params, method="AdviceService.GiveMeAdvice", request_id=1):
    return {"jsonrpc": "2.0", "method": method, "params": params, "id": request_id}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_give_me_advice(client):
    resp = call(client, request({"topic": "life"}))

    assert resp.status_code == 200
    assert resp.json() == {"jsonrpc": "2.0", "result": {"adviceList": ["a", "b", "c"]}, "id": 1}


def test_params_as_single_element_array(client):
    resp = call(client, request([{"topic": "life", "amount": 2}], method="GiveMeAdvice"))
    assert resp.json()["result"] == {"adviceList": ["a", "b"]}


def test_wildcard_accept_is_normalized(client):
    resp = call(client, request({"topic": "life"}), headers={"Content-Type": "application/json", "Accept": "*/*"})
    assert resp.status_code == 200
    assert resp.json()["result"]["adviceList"] == ["a", "b", "c"]


def test_other_accept_is_refused(client, service):
    resp = call(client, request({"topic": "life"}), headers={"Content-Type": "application/json", "Accept": "text/html"})
    assert resp.status_code == 406
    assert service.calls == []


def test_wrong_content_type_is_refused(client):
    resp = client.post("/rpc", content="topic=life", headers={"Content-Type": "text/plain", "Accept": "application/json"})
    assert resp.status_code == 415


def test_method_error_becomes_rpc_error(monkeypatch):
    failing = FakeService(error=CacheError("Cannot store advices for 'life'"))
    monkeypatch.setattr(main, "build_service", lambda http_client, store: failing)

    with TestClient(main.app) as test_client:
        body = call(test_client, request({"topic": "life"})).json()

    assert body["error"] == {"code": -32000, "message": "Cannot store advices for 'life'"}
    assert body["id"] == 1


def test_negative_amount_never_reaches_the_getter(monkeypatch):
    class ExplodingGetter:
        async def get_advices_for(self, topic):
            raise AssertionError("getter must not be called")

        async def get_advices_limited_for(self, topic, amount):
            raise AssertionError("getter must not be called")

    monkeypatch.setattr(main, "build_service", lambda http_client, store: AdviceService(ExplodingGetter()))

    with TestClient(main.app) as test_client:
        body = call(test_client, request({"topic": "life", "amount": -1})).json()

    assert body["error"]["code"] == -32000
    assert "less than 0" in body["error"]["message"]


def test_unknown_method(client):
    body = call(client, request({"topic": "life"}, method="AdviceService.Nope")).json()
    assert body["error"]["code"] == -32601


@pytest.mark.parametrize("params", [None, {}, {"topic": ""}, {"topic": "t", "amount": "2"}, [1, 2]])
def test_invalid_params(client, params):
    body = call(client, request(params)).json()
    assert body["error"]["code"] == -32602


def test_parse_error(client):
    resp = client.post("/rpc", content="{not json", headers=JSON_HEADERS)
    assert resp.json()["error"]["code"] == -32700
    assert resp.json()["id"] is None


@pytest.mark.parametrize("payload", [{"method": "GiveMeAdvice", "id": 1}, {"jsonrpc": "2.0", "id": 1}, 42, []])
def test_invalid_request(client, payload):
    assert call(client, payload).json()["error"]["code"] == -32600


def test_batch(client):
    payload = [
        request({"topic": "life"}, request_id=1),
        request({"topic": "life", "amount": 1}, request_id="two"),
        {"jsonrpc": "2.0", "method": "GiveMeAdvice", "params": {"topic": "quiet"}},
    ]
    body = call(client, payload).json()

    assert [reply["id"] for reply in body] == [1, "two"]
    assert body[1]["result"] == {"adviceList": ["a"]}


def test_notification_gets_no_content(client, service):
    resp = call(client, {"jsonrpc": "2.0", "method": "GiveMeAdvice", "params": {"topic": "life"}})

    assert resp.status_code == 204
    assert [args.topic for args in service.calls] == ["life"]
