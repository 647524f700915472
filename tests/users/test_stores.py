import asyncio

from precisely import assert_that, equal_to, is_sequence
import pytest

from graphwalk.users.stores import InMemoryRecordStore, RecordNotFound


def _store():
    return InMemoryRecordStore("users", (
        {"id": "1", "name": "Bob", "companyId": "a"},
        {"id": "2", "name": "Jim", "companyId": "b"},
        {"id": "3", "name": "Ann", "companyId": "a"},
    ))


def test_record_can_be_found_by_id():
    store = _store()

    assert_that(asyncio.run(store.find("2")), equal_to({"id": "2", "name": "Jim", "companyId": "b"}))


def test_missing_record_is_none():
    store = _store()

    assert_that(asyncio.run(store.find("4")), equal_to(None))


def test_records_are_filtered_by_criteria_in_insertion_order():
    store = _store()

    records = asyncio.run(store.find_all(companyId="a"))

    assert_that(records, is_sequence(
        equal_to({"id": "1", "name": "Bob", "companyId": "a"}),
        equal_to({"id": "3", "name": "Ann", "companyId": "a"}),
    ))


def test_created_records_are_given_the_next_free_id():
    store = _store()

    record = asyncio.run(store.create({"name": "Tim"}))

    assert_that(record, equal_to({"id": "4", "name": "Tim"}))
    assert_that(asyncio.run(store.find("4")), equal_to(record))


def test_record_with_existing_id_cannot_be_created():
    store = _store()

    pytest.raises(ValueError, lambda: asyncio.run(store.create({"id": "1", "name": "Tim"})))


def test_update_merges_fields_except_id():
    store = _store()

    record = asyncio.run(store.update("1", {"id": "9", "name": "Robert"}))

    assert_that(record, equal_to({"id": "1", "name": "Robert", "companyId": "a"}))


def test_updating_missing_record_raises_record_not_found():
    store = _store()

    error = pytest.raises(RecordNotFound, lambda: asyncio.run(store.update("4", {"name": "Tim"})))

    assert_that(str(error.value), equal_to("no record in users with id 4"))


def test_deleted_record_is_gone():
    store = _store()

    deleted_id = asyncio.run(store.delete("1"))

    assert_that(deleted_id, equal_to("1"))
    assert_that(asyncio.run(store.find("1")), equal_to(None))


def test_deleting_missing_record_raises_record_not_found():
    store = _store()

    pytest.raises(RecordNotFound, lambda: asyncio.run(store.delete("4")))


def test_returned_records_are_copies():
    store = _store()

    record = asyncio.run(store.find("1"))
    record["name"] = "Robert"

    assert_that(asyncio.run(store.find("1"))["name"], equal_to("Bob"))
