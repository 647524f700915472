import collections
import itertools


USERS = "users"
COMPANIES = "companies"


class RecordNotFound(LookupError):
    def __init__(self, collection, id):
        super().__init__("no record in {} with id {}".format(collection, id))
        self.collection = collection
        self.id = id


class RecordStore(object):
    """
    A collection of JSON-like records keyed by their ``"id"``.

    All operations are coroutines. ``update`` and ``delete`` raise
    ``RecordNotFound`` when no record has the given id.
    """

    async def find(self, id):
        raise NotImplementedError()

    async def find_all(self, **criteria):
        raise NotImplementedError()

    async def create(self, record):
        raise NotImplementedError()

    async def update(self, id, partial):
        raise NotImplementedError()

    async def delete(self, id):
        raise NotImplementedError()


class InMemoryRecordStore(RecordStore):
    def __init__(self, collection, records=()):
        self.collection = collection
        self._records = collections.OrderedDict(
            (record["id"], dict(record))
            for record in records
        )
        self._ids = itertools.count(self._first_free_id())

    def _first_free_id(self):
        numeric_ids = [
            int(id)
            for id in self._records
            if id.isdigit()
        ]
        return max(numeric_ids, default=0) + 1

    async def find(self, id):
        record = self._records.get(id)
        if record is None:
            return None
        else:
            return dict(record)

    async def find_all(self, **criteria):
        return [
            dict(record)
            for record in self._records.values()
            if all(record.get(key) == value for key, value in criteria.items())
        ]

    async def create(self, record):
        record = dict(record)
        if record.get("id") is None:
            record["id"] = self._next_id()
        elif record["id"] in self._records:
            raise ValueError("{} already has a record with id {}".format(self.collection, record["id"]))

        self._records[record["id"]] = record
        return dict(record)

    def _next_id(self):
        while True:
            id = str(next(self._ids))
            if id not in self._records:
                return id

    async def update(self, id, partial):
        record = self._records.get(id)
        if record is None:
            raise RecordNotFound(self.collection, id)

        record.update(
            (key, value)
            for key, value in partial.items()
            if key != "id"
        )
        return dict(record)

    async def delete(self, id):
        if id not in self._records:
            raise RecordNotFound(self.collection, id)

        del self._records[id]
        return id


demo_users = (
    {"id": "23", "firstName": "Bill", "age": 20, "companyId": "1"},
    {"id": "40", "firstName": "Alex", "age": 40, "companyId": "2"},
    {"id": "41", "firstName": "Nick", "age": 40, "companyId": "2"},
)


demo_companies = (
    {"id": "1", "name": "Apple", "description": "iphone"},
    {"id": "2", "name": "Google", "description": "search"},
)


def create_demo_stores():
    return {
        USERS: InMemoryRecordStore(USERS, demo_users),
        COMPANIES: InMemoryRecordStore(COMPANIES, demo_companies),
    }
