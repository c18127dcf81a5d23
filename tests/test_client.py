import asyncio

import httpx
import pytest

from replbook import AsyncReplbook, Replbook, TransportError
from replbook.storage import REPL_ID_KEY, FileStorage, MemoryStorage
from replbook.transport.dispatch import BoundedDispatcher, UnboundedDispatcher


class TestAsyncReplbook:
    @pytest.mark.asyncio
    async def test_start_resolves_session_and_binds_notebook(self, transport, evaluator, storage):
        evaluator.results["2+2"] = "4"
        client = AsyncReplbook(api_base="http://evaluator.test", storage=storage, transport=transport)
        engine = await client.start()
        assert engine.repl_id == 42
        engine.update_input(0, "2+2")
        cell = await engine.run_cell(0)
        assert cell.output == "4"
        assert evaluator.paths() == ["/repl", "/eval/42"]
        await client.close()

    @pytest.mark.asyncio
    async def test_start_with_persisted_session_skips_creation(self, transport, evaluator):
        client = AsyncReplbook(storage=MemoryStorage({REPL_ID_KEY: "7"}), transport=transport)
        engine = await client.start()
        assert engine.repl_id == 7
        assert evaluator.requests == []
        await client.close()

    @pytest.mark.asyncio
    async def test_failed_session_gives_disabled_notebook(self, storage):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"id": "x"}))
        client = AsyncReplbook(storage=storage, transport=transport)
        engine = await client.start()
        assert not engine.session_available
        assert await engine.run_cell(0) is None
        await client.close()

    @pytest.mark.asyncio
    async def test_eval_requires_session(self, storage):
        transport = httpx.MockTransport(lambda r: httpx.Response(503, text="down"))
        client = AsyncReplbook(storage=storage, transport=transport)
        with pytest.raises(TransportError):
            await client.eval("1")
        await client.close()

    @pytest.mark.asyncio
    async def test_default_storage_is_state_file(self, transport):
        client = AsyncReplbook(transport=transport)
        assert isinstance(client.storage, FileStorage)
        await client.resolve_session()
        assert FileStorage(client.settings.state_file).get(REPL_ID_KEY) == "42"
        await client.close()

    @pytest.mark.asyncio
    async def test_dispatcher_is_passed_to_notebooks(self, transport, storage):
        dispatcher = BoundedDispatcher(1)
        client = AsyncReplbook(storage=storage, transport=transport, dispatcher=dispatcher)
        engine = await client.start()
        assert engine._dispatcher is dispatcher
        await client.close()


def test_sync_wrapper(transport, evaluator, storage):
    evaluator.results["x"] = "y"
    client = Replbook(storage=storage, transport=transport)
    assert client.resolve_session() == 42
    assert client.repl_id == 42
    assert client.eval("x") == "y"
    client.close()


class TestDispatchers:
    @pytest.mark.asyncio
    async def test_unbounded_passes_result_through(self):
        async def work():
            return 5

        assert await UnboundedDispatcher().dispatch(work()) == 5

    def test_bounded_rejects_zero_limit(self):
        with pytest.raises(ValueError):
            BoundedDispatcher(0)

    @pytest.mark.asyncio
    async def test_bounded_propagates_errors_and_releases_slot(self):
        dispatcher = BoundedDispatcher(1)

        async def fail():
            raise RuntimeError("x")

        async def ok():
            return "ok"

        with pytest.raises(RuntimeError):
            await dispatcher.dispatch(fail())
        assert await asyncio.wait_for(dispatcher.dispatch(ok()), timeout=1) == "ok"
