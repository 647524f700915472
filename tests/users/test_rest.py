import asyncio
import json

import httpx
from precisely import assert_that, equal_to
import pytest

from graphwalk.users.rest import RestRecordStore
from graphwalk.users.stores import RecordNotFound


class FakeServer(object):
    def __init__(self, records):
        self.records = dict((record["id"], record) for record in records)
        self.requests = []

    def handle(self, request):
        self.requests.append((request.method, request.url.path, dict(request.url.params)))
        parts = request.url.path.strip("/").split("/")

        if len(parts) == 1:
            if request.method == "GET":
                matching = [
                    record
                    for record in self.records.values()
                    if all(str(record.get(key)) == value for key, value in request.url.params.items())
                ]
                return httpx.Response(200, json=matching)
            elif request.method == "POST":
                record = dict(json.loads(request.content), id=str(len(self.records) + 1))
                self.records[record["id"]] = record
                return httpx.Response(201, json=record)

        elif len(parts) == 2:
            id = parts[1]
            if id not in self.records:
                return httpx.Response(404, json={})
            elif request.method == "GET":
                return httpx.Response(200, json=self.records[id])
            elif request.method == "PATCH":
                self.records[id].update(json.loads(request.content))
                return httpx.Response(200, json=self.records[id])
            elif request.method == "DELETE":
                del self.records[id]
                return httpx.Response(200, json={})

        return httpx.Response(500)


def _run(server, func):
    async def run():
        transport = httpx.MockTransport(server.handle)
        async with httpx.AsyncClient(transport=transport, base_url="http://data.example") as client:
            return await func(RestRecordStore(client, "users"))

    return asyncio.run(run())


def _server():
    return FakeServer((
        {"id": "23", "firstName": "Bill", "companyId": "1"},
        {"id": "40", "firstName": "Alex", "companyId": "2"},
    ))


def test_record_is_found_by_id():
    server = _server()

    record = _run(server, lambda store: store.find("23"))

    assert_that(record, equal_to({"id": "23", "firstName": "Bill", "companyId": "1"}))
    assert_that(server.requests, equal_to([("GET", "/users/23", {})]))


def test_missing_record_is_none():
    record = _run(_server(), lambda store: store.find("99"))

    assert_that(record, equal_to(None))


def test_criteria_are_sent_as_query_parameters():
    server = _server()

    records = _run(server, lambda store: store.find_all(companyId="2"))

    assert_that(records, equal_to([{"id": "40", "firstName": "Alex", "companyId": "2"}]))
    assert_that(server.requests, equal_to([("GET", "/users", {"companyId": "2"})]))


def test_created_record_is_returned_by_server():
    server = _server()

    record = _run(server, lambda store: store.create({"firstName": "Nick"}))

    assert_that(record, equal_to({"id": "3", "firstName": "Nick"}))


def test_update_sends_partial_record():
    server = _server()

    record = _run(server, lambda store: store.update("23", {"firstName": "William"}))

    assert_that(record, equal_to({"id": "23", "firstName": "William", "companyId": "1"}))
    assert_that(server.requests, equal_to([("PATCH", "/users/23", {})]))


def test_updating_missing_record_raises_record_not_found():
    pytest.raises(
        RecordNotFound,
        lambda: _run(_server(), lambda store: store.update("99", {"firstName": "William"})),
    )


def test_delete_returns_id():
    server = _server()

    deleted_id = _run(server, lambda store: store.delete("40"))

    assert_that(deleted_id, equal_to("40"))
    assert_that(list(server.records), equal_to(["23"]))


def test_deleting_missing_record_raises_record_not_found():
    pytest.raises(RecordNotFound, lambda: _run(_server(), lambda store: store.delete("99")))


def test_server_errors_are_raised():
    def handle(request):
        return httpx.Response(503)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handle), base_url="http://data.example") as client:
            return await RestRecordStore(client, "users").find_all()

    pytest.raises(httpx.HTTPStatusError, lambda: asyncio.run(run()))
