from .stores import RecordNotFound, RecordStore


class RestRecordStore(RecordStore):
    """
    A record store backed by a JSON-server style REST collection.

    ``client`` is an ``httpx.AsyncClient`` whose base URL points at the
    server; records live under ``/<collection>/<id>``. HTTP errors other
    than a missing record are raised as ``httpx.HTTPStatusError``.
    """

    def __init__(self, client, collection):
        self._client = client
        self.collection = collection

    def _path(self, id=None):
        if id is None:
            return "/{}".format(self.collection)
        else:
            return "/{}/{}".format(self.collection, id)

    async def find(self, id):
        response = await self._client.get(self._path(id))
        if response.status_code == 404:
            return None

        response.raise_for_status()
        return response.json()

    async def find_all(self, **criteria):
        response = await self._client.get(self._path(), params=criteria)
        response.raise_for_status()
        return response.json()

    async def create(self, record):
        response = await self._client.post(self._path(), json=record)
        response.raise_for_status()
        return response.json()

    async def update(self, id, partial):
        response = await self._client.patch(self._path(id), json=partial)
        if response.status_code == 404:
            raise RecordNotFound(self.collection, id)

        response.raise_for_status()
        return response.json()

    async def delete(self, id):
        response = await self._client.delete(self._path(id))
        if response.status_code == 404:
            raise RecordNotFound(self.collection, id)

        response.raise_for_status()
        return id
