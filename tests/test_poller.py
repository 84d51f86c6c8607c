import asyncio

import pytest

from core.domain.models import LoadStatus, LoadTrigger
from core.services.confirmation_sync import ConfirmationSync
from core.services.poller import poll_confirmations
from fake_client import FakeAccount, FakeSession, make_confirmation


@pytest.mark.asyncio
async def test_polls_until_max_cycles(settings):
    account = FakeAccount(confirmations=[make_confirmation("A")])
    seen = []

    last = await poll_confirmations(
        ConfirmationSync(account, settings=settings),
        interval=0.01,
        on_result=seen.append,
        max_cycles=3,
    )

    assert len(seen) == 3
    assert last.status is LoadStatus.LIST
    assert account.fetch_confirmations.await_count == 3


@pytest.mark.asyncio
async def test_stops_on_terminal_result(settings):
    account = FakeAccount(FakeSession(refresh_expired=True))
    seen = []

    last = await poll_confirmations(
        ConfirmationSync(account, settings=settings),
        interval=0.01,
        on_result=seen.append,
        max_cycles=5,
    )

    assert len(seen) == 1
    assert last.is_terminal


@pytest.mark.asyncio
async def test_failure_does_not_stop_polling(settings):
    account = FakeAccount()
    account.fetch_confirmations.side_effect = [ConnectionError("down"), []]
    seen = []

    await poll_confirmations(
        ConfirmationSync(account, settings=settings),
        interval=0.01,
        on_result=seen.append,
        max_cycles=2,
    )

    assert [r.status for r in seen] == [LoadStatus.FAILURE, LoadStatus.EMPTY]


@pytest.mark.asyncio
async def test_stop_event_ends_polling(settings):
    account = FakeAccount()
    stop = asyncio.Event()
    seen = []

    async def on_result(result):
        seen.append(result)
        stop.set()

    last = await poll_confirmations(
        ConfirmationSync(account, settings=settings),
        interval=60,
        on_result=on_result,
        stop=stop,
    )

    assert len(seen) == 1
    assert last.status is LoadStatus.EMPTY


@pytest.mark.asyncio
async def test_already_stopped_returns_none(settings):
    account = FakeAccount()
    stop = asyncio.Event()
    stop.set()

    last = await poll_confirmations(
        ConfirmationSync(account, settings=settings),
        interval=1,
        on_result=lambda result: None,
        stop=stop,
    )

    assert last is None
    account.fetch_confirmations.assert_not_called()


@pytest.mark.asyncio
async def test_loads_are_timer_triggered(settings):
    account = FakeAccount()
    sync = ConfirmationSync(account, settings=settings)
    triggers = []
    original = sync.load

    async def recording_load(trigger=LoadTrigger.MANUAL):
        triggers.append(trigger)
        return await original(trigger)

    sync.load = recording_load

    await poll_confirmations(sync, interval=0.01, on_result=lambda r: None, max_cycles=1)

    assert triggers == [LoadTrigger.TIMER]
