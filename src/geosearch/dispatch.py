"""
Debounced autocomplete dispatch.

Rapid keystrokes are coalesced into one trailing provider call per
debounce window. Every call that actually reaches the provider carries
a request token; a response is applied only while its token is still
the latest issued, so a slow early response can never overwrite a
fresher one.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Set

from geosearch.exceptions import ProviderError
from geosearch.interfaces import Provider
from geosearch.models import SearchOutcome, Selection

logger = logging.getLogger(__name__)


async def search_outcome(provider: Provider, selection: Selection) -> SearchOutcome:
    """
    Call *provider* and fold any failure into a SearchOutcome.

    Accepts providers whose ``search`` is a coroutine or a plain call.
    """
    try:
        results = provider.search(selection)
        if inspect.isawaitable(results):
            results = await results
    except Exception as exc:
        logger.warning(
            "Provider search failed for '%s'", selection.query, exc_info=True
        )
        return SearchOutcome.failure(ProviderError(selection.query, str(exc)))
    return SearchOutcome.success(results or ())


class Debouncer:
    """
    Trailing-edge debounce on the running event loop.

    Each ``call`` replaces the pending one; only the last call made
    within *delay* seconds of quiet actually runs.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def call(self, fn: Callable[..., Awaitable[Any]], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, fn, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, fn: Callable[..., Awaitable[Any]], args: tuple) -> None:
        self._handle = None
        task = asyncio.ensure_future(fn(*args))
        # Keep a reference until done
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def join(self) -> None:
        """Wait for calls that have already fired to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class QueryDispatcher:
    """
    Sends settled autocomplete queries to the provider.

    *on_results* receives the candidates of the latest request,
    *on_failure* the failed outcome of the latest request, and
    *on_clear* is called synchronously for empty input. *on_dispatch*
    is told when a request actually leaves for the provider.
    """

    def __init__(
        self,
        provider: Provider,
        on_results: Callable[[SearchOutcome], None],
        on_failure: Callable[[SearchOutcome], None],
        on_clear: Callable[[], None],
        delay_ms: int = 250,
        on_dispatch: Optional[Callable[[str], None]] = None,
    ):
        self._provider = provider
        self._on_results = on_results
        self._on_failure = on_failure
        self._on_clear = on_clear
        self._on_dispatch = on_dispatch
        self._debouncer = Debouncer(delay_ms / 1000)
        self._issued = 0

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def dispatch(self, query: str) -> None:
        if not query:
            self.cancel()
            self._on_clear()
            return
        self._debouncer.call(self._run, query)

    def cancel(self) -> None:
        """Drop the pending window and make in-flight responses stale."""
        self._debouncer.cancel()
        self._issued += 1

    async def join(self) -> None:
        await self._debouncer.join()

    async def _run(self, query: str) -> None:
        self._issued += 1
        token = self._issued
        logger.debug("Dispatching '%s' (request %d)", query, token)
        if self._on_dispatch is not None:
            self._on_dispatch(query)

        outcome = await search_outcome(self._provider, Selection(query=query))

        if token != self._issued:
            logger.debug(
                "Discarding stale response for '%s' (request %d, latest %d)",
                query, token, self._issued,
            )
            return

        if outcome.ok:
            self._on_results(outcome)
        else:
            self._on_failure(outcome)
