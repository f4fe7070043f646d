"""Tests for geosearch.dispatch module."""

import asyncio

from conftest import LYON, PARIS, ScriptedProvider

from geosearch.dispatch import Debouncer, QueryDispatcher, search_outcome
from geosearch.exceptions import ProviderError
from geosearch.models import Selection

DELAY_MS = 20
SETTLE = 0.08


class Recorder:
    def __init__(self):
        self.results = []
        self.failures = []
        self.clears = 0

    def dispatcher(self, provider, **kwargs):
        return QueryDispatcher(
            provider,
            on_results=lambda outcome: self.results.append(outcome.results),
            on_failure=self.failures.append,
            on_clear=self._clear,
            delay_ms=DELAY_MS,
            **kwargs,
        )

    def _clear(self):
        self.clears += 1


class TestSearchOutcome:
    def test_success(self):
        provider = ScriptedProvider({"Paris": [PARIS]})
        outcome = asyncio.run(search_outcome(provider, Selection("Paris")))
        assert outcome.ok
        assert outcome.best is PARIS

    def test_failure_is_a_value(self):
        provider = ScriptedProvider(fail=["Paris"])
        outcome = asyncio.run(search_outcome(provider, Selection("Paris")))
        assert not outcome.ok
        assert isinstance(outcome.error, ProviderError)
        assert outcome.error.query == "Paris"

    def test_sync_provider_accepted(self):
        class SyncProvider:
            def search(self, selection):
                return [PARIS]

        outcome = asyncio.run(search_outcome(SyncProvider(), Selection("x")))
        assert outcome.results == (PARIS,)


class TestDebouncer:
    def test_only_trailing_call_runs(self):
        calls = []

        async def record(value):
            calls.append(value)

        async def scenario():
            debouncer = Debouncer(DELAY_MS / 1000)
            for value in ("P", "Pa", "Par"):
                debouncer.call(record, value)
            await asyncio.sleep(SETTLE)
            await debouncer.join()

        asyncio.run(scenario())
        assert calls == ["Par"]


class TestQueryDispatcher:
    def test_keystrokes_within_window_coalesce(self):
        provider = ScriptedProvider({"Paris": [PARIS]})
        rec = Recorder()

        async def scenario():
            dispatcher = rec.dispatcher(provider)
            for text in ("P", "Pa", "Par", "Pari", "Paris"):
                dispatcher.dispatch(text)
            await asyncio.sleep(SETTLE)
            await dispatcher.join()

        asyncio.run(scenario())
        assert provider.queries == ["Paris"]
        assert rec.results == [(PARIS,)]

    def test_empty_query_clears_without_provider(self):
        provider = ScriptedProvider()
        rec = Recorder()

        async def scenario():
            dispatcher = rec.dispatcher(provider)
            dispatcher.dispatch("")
            assert rec.clears == 1
            await asyncio.sleep(SETTLE)

        asyncio.run(scenario())
        assert provider.queries == []

    def test_empty_query_drops_pending_window(self):
        provider = ScriptedProvider({"Paris": [PARIS]})
        rec = Recorder()

        async def scenario():
            dispatcher = rec.dispatcher(provider)
            dispatcher.dispatch("Paris")
            dispatcher.dispatch("")
            await asyncio.sleep(SETTLE)

        asyncio.run(scenario())
        assert provider.queries == []
        assert rec.results == []

    def test_stale_response_discarded(self):
        provider = ScriptedProvider(
            {"A": [PARIS], "AB": [LYON]}, delays={"A": 0.15}
        )
        rec = Recorder()

        async def scenario():
            dispatcher = rec.dispatcher(provider)
            dispatcher.dispatch("A")
            await asyncio.sleep(SETTLE)      # "A" is now in flight
            dispatcher.dispatch("AB")
            await asyncio.sleep(0.3)
            await dispatcher.join()

        asyncio.run(scenario())
        assert provider.queries == ["A", "AB"]
        assert rec.results == [(LYON,)]

    def test_failure_routed(self):
        provider = ScriptedProvider(fail=["Paris"])
        rec = Recorder()

        async def scenario():
            dispatcher = rec.dispatcher(provider)
            dispatcher.dispatch("Paris")
            await asyncio.sleep(SETTLE)
            await dispatcher.join()

        asyncio.run(scenario())
        assert rec.results == []
        assert len(rec.failures) == 1

    def test_on_dispatch_notified(self):
        provider = ScriptedProvider({"Paris": [PARIS]})
        rec = Recorder()
        started = []

        async def scenario():
            dispatcher = rec.dispatcher(provider, on_dispatch=started.append)
            dispatcher.dispatch("Paris")
            assert dispatcher.pending
            await asyncio.sleep(SETTLE)
            await dispatcher.join()

        asyncio.run(scenario())
        assert started == ["Paris"]
