"""Unit tests for the EntityStore."""

import httpx
import pytest

from mec_admin.application.schemas import CLIENT_FORM, SUBSCRIBER_FORM
from mec_admin.application.services import EntityStore, SelectionSet
from mec_admin.domain.entities import EntityType
from mec_admin.domain.exceptions import FetchError, MutationError, NoSelectionError

from tests.unit.fakes import FakeAdminApi


@pytest.fixture
def api() -> FakeAdminApi:
    return FakeAdminApi()


@pytest.fixture
def store(api: FakeAdminApi) -> EntityStore:
    return EntityStore(api, CLIENT_FORM)


def _client(name: str) -> dict:
    return {"client_name": name, "companies": [{"name": f"{name} Inc"}], "client_emails": [], "client_phones": []}


@pytest.mark.asyncio
async def test_refresh_replaces_cache_in_backend_order(api, store):
    api.seed(EntityType.CLIENTS, _client("B"), _client("A"))
    records = await store.refresh()

    assert [r.get("client_name") for r in records] == ["B", "A"]
    assert store.loaded is True
    assert store.loading is False


@pytest.mark.asyncio
async def test_refresh_failure_leaves_cache_untouched(api, store):
    api.seed(EntityType.CLIENTS, _client("A"))
    await store.refresh()

    api.fail("fetch_list", message="Database offline")
    with pytest.raises(FetchError) as exc_info:
        await store.refresh()

    assert exc_info.value.message == "Database offline"
    assert len(store.records) == 1


@pytest.mark.asyncio
async def test_refresh_transport_failure_uses_generic_message(api, store):
    api.fail("fetch_list", exc=httpx.ConnectError("refused"))
    with pytest.raises(FetchError) as exc_info:
        await store.refresh()
    assert exc_info.value.message == "Failed to fetch clients"
    assert store.loading is False


@pytest.mark.asyncio
async def test_create_refreshes_from_backend(api, store):
    await store.refresh()
    outcome = await store.create(_client("Acme"))

    assert outcome.record is not None
    assert store.ids == [outcome.record.id]
    assert api.count("fetch_list") == 2


@pytest.mark.asyncio
async def test_update_reflects_backend_without_duplicates(api, store):
    (client_id,) = api.seed(EntityType.CLIENTS, _client("Old"))
    await store.refresh()

    await store.update(client_id, {"client_name": "New"})

    assert len(store.records) == 1
    assert store.get(client_id).get("client_name") == "New"


@pytest.mark.asyncio
async def test_mutation_failure_surfaces_backend_message(api, store):
    api.seed(EntityType.CLIENTS, _client("A"))
    await store.refresh()
    api.fail("create_record", message="Client name already exists")

    with pytest.raises(MutationError) as exc_info:
        await store.create(_client("A"))

    assert exc_info.value.message == "Client name already exists"
    assert len(store.records) == 1
    assert api.count("fetch_list") == 1


@pytest.mark.asyncio
async def test_mutation_failure_without_message_is_generic(api, store):
    api.fail("update_record", exc=httpx.ReadTimeout("slow"))
    with pytest.raises(MutationError) as exc_info:
        await store.update("missing", {})
    assert exc_info.value.message == "Operation failed"


@pytest.mark.asyncio
async def test_delete_evicts_id_from_cache_and_selection(api, store):
    ids = api.seed(EntityType.CLIENTS, _client("A"), _client("B"))
    await store.refresh()
    selection = SelectionSet()
    store.attach_selection(selection)
    selection.select_all(ids)

    outcome = await store.delete(ids[0])

    assert outcome.record.id == ids[0]
    assert store.ids == [ids[1]]
    assert selection.ids == [ids[1]]


@pytest.mark.asyncio
async def test_delete_failure_keeps_cache(api, store):
    ids = api.seed(EntityType.CLIENTS, _client("A"))
    await store.refresh()
    api.fail("delete_record")

    with pytest.raises(MutationError) as exc_info:
        await store.delete(ids[0])

    assert exc_info.value.message == "Failed to delete client"
    assert store.ids == ids


@pytest.mark.asyncio
async def test_refresh_failure_after_mutation_is_recorded_not_raised(api, store):
    ids = api.seed(EntityType.CLIENTS, _client("A"), _client("B"))
    await store.refresh()
    api.fail("fetch_list", message="Database offline")

    await store.delete(ids[0])

    assert store.refresh_error is not None
    assert store.ids == [ids[1]]


@pytest.mark.asyncio
async def test_bulk_delete_clears_selection(api):
    store = EntityStore(api, SUBSCRIBER_FORM)
    ids = api.seed(EntityType.SUBSCRIBERS, *({"email": f"s{i}@x.io"} for i in range(5)))
    await store.refresh()
    selection = SelectionSet()
    store.attach_selection(selection)
    for record_id in ids[:3]:
        selection.toggle(record_id)

    evicted = await store.delete_selected(selection)

    assert [r.id for r in evicted] == ids[:3]
    assert store.ids == ids[3:]
    assert not selection
    assert selection.is_all_selected(store.ids) is False


@pytest.mark.asyncio
async def test_bulk_delete_requires_selection(api):
    store = EntityStore(api, SUBSCRIBER_FORM)
    with pytest.raises(NoSelectionError):
        await store.delete_selected(SelectionSet())
    assert api.count("delete_records") == 0


@pytest.mark.asyncio
async def test_wrapped_subscriber_list_is_accepted(api):
    store = EntityStore(api, SUBSCRIBER_FORM)
    api.wrapped_lists.add(EntityType.SUBSCRIBERS)
    api.seed(EntityType.SUBSCRIBERS, {"email": "a@x.io"})

    records = await store.refresh()

    assert len(records) == 1


@pytest.mark.asyncio
async def test_refresh_prunes_selection(api, store):
    ids = api.seed(EntityType.CLIENTS, _client("A"), _client("B"))
    await store.refresh()
    selection = SelectionSet()
    store.attach_selection(selection)
    selection.select_all(ids)

    api.documents[EntityType.CLIENTS].pop(0)
    await store.refresh()

    assert selection.ids == [ids[1]]


@pytest.mark.asyncio
async def test_fetch_one_does_not_touch_cache(api, store):
    (client_id,) = api.seed(EntityType.CLIENTS, _client("A"))
    record = await store.fetch_one(client_id)

    assert record.id == client_id
    assert store.records == []
