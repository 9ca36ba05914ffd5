"""Unit tests for SupersedingFetcher."""

import asyncio

import pytest

from form_builder.session.fetch import SupersedingFetcher


class TestSupersedingFetcher:
    """Tests for newest-request-wins fetching."""

    @pytest.mark.asyncio
    async def test_successful_fetch(self):
        fetcher = SupersedingFetcher()

        async def load():
            return [1, 2]

        state = await fetcher.fetch("items", load)

        assert state.data == [1, 2]
        assert state.loading is False
        assert state.error is None
        assert state.generation == 1
        assert not fetcher.in_flight("items")

    @pytest.mark.asyncio
    async def test_newer_fetch_supersedes_older(self):
        fetcher = SupersedingFetcher()
        first_gate = asyncio.Event()
        first_cancelled = asyncio.Event()

        async def slow():
            try:
                await first_gate.wait()
            except asyncio.CancelledError:
                first_cancelled.set()
                raise
            return "old"

        async def fast():
            return "new"

        first = asyncio.ensure_future(fetcher.fetch("schema", slow))
        await asyncio.sleep(0)
        assert fetcher.in_flight("schema")
        assert fetcher.state("schema").loading

        second = await fetcher.fetch("schema", fast)

        assert await first is None
        assert first_cancelled.is_set()
        assert second.data == "new"
        assert fetcher.state("schema").data == "new"

    @pytest.mark.asyncio
    async def test_error_keeps_previous_data(self):
        fetcher = SupersedingFetcher()

        async def ok():
            return "v1"

        async def broken():
            raise ConnectionError("offline")

        await fetcher.fetch("schema", ok)
        state = await fetcher.fetch("schema", broken)

        assert isinstance(state.error, ConnectionError)
        assert state.data == "v1"
        assert state.loading is False

        state = await fetcher.fetch("schema", ok)
        assert state.error is None

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        fetcher = SupersedingFetcher()
        gate = asyncio.Event()

        async def slow_schema():
            await gate.wait()
            return "schema"

        async def submissions():
            return ["s1"]

        pending = asyncio.ensure_future(fetcher.fetch("schema", slow_schema))
        await asyncio.sleep(0)
        state = await fetcher.fetch("submissions", submissions)
        gate.set()

        assert state.data == ["s1"]
        assert (await pending).data == "schema"

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        fetcher = SupersedingFetcher()
        gate = asyncio.Event()

        async def never():
            await gate.wait()

        pending = asyncio.ensure_future(fetcher.fetch("schema", never))
        await asyncio.sleep(0)
        fetcher.cancel_all()

        with pytest.raises(asyncio.CancelledError):
            await pending
        assert fetcher.state("schema").loading is False
