"""Unit tests for the AdminConsole composition root."""

import pytest

from mec_admin.config import Settings
from mec_admin.domain.entities import EntityType
from mec_admin.infrastructure.interaction import StaticConfirmationGate
from mec_admin.main import AdminConsole

from tests.unit.fakes import FakeAdminApi, RecordingNotifier, image


def _console(api: FakeAdminApi, notifier: RecordingNotifier) -> AdminConsole:
    return AdminConsole(
        Settings(_env_file=None),
        api=api,
        notifier=notifier,
        confirmation=StaticConfirmationGate(answer=True),
    )


@pytest.mark.asyncio
async def test_console_wires_every_page():
    api = FakeAdminApi()
    (client_id,) = api.seed(EntityType.CLIENTS, {"client_name": "Acme"})

    async with _console(api, RecordingNotifier()) as console:
        assert set(console.pages) == set(EntityType)
        await console.page("clients").load()
        assert console.page(EntityType.CLIENTS).store.ids == [client_id]
        assert console.dashboard is not None


@pytest.mark.asyncio
async def test_exit_releases_uploads_of_open_forms():
    api = FakeAdminApi()

    async with _console(api, RecordingNotifier()) as console:
        page = console.page(EntityType.BANNERS)
        await page.open_create()
        result = await page.upload_asset(page.session.slot("img"), image())

    assert api.released == [result.data]
    assert not page.session.is_open
