"""SearchControl — the main entry point for the library."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Coroutine, Optional, Set

from geosearch.dispatch import QueryDispatcher, search_outcome
from geosearch.exceptions import ConfigurationError
from geosearch.handlers import HandlerSuspension
from geosearch.interfaces import HostMap, Provider
from geosearch.keys import (
    ARROW_DOWN_KEY,
    ENTER_KEY,
    ESCAPE_KEY,
    NAVIGATION_KEYS,
    SPECIAL_KEYS,
)
from geosearch.markers import Marker, MarkerSet
from geosearch.models import SearchOutcome, SearchResult, Selection
from geosearch.options import Options
from geosearch.results import ResultList
from geosearch.view import ViewCenterer

logger = logging.getLogger(__name__)

SHOWLOCATION_EVENT = "geosearch/showlocation"


class ControlState(str, Enum):
    IDLE = "idle"
    TYPING = "typing"
    AWAITING_RESULT = "awaiting_result"
    SHOWING_CANDIDATES = "showing_candidates"
    COMMITTED = "committed"


class SearchControl:
    """
    Interactive search overlay for a host map.

    The host application forwards form events (key presses, clicks,
    pointer enter/leave) to the ``on_*`` methods; the control talks
    back to the map through the HostMap protocol. All work happens on
    the running asyncio loop.

    Raises ConfigurationError when built without a usable provider or
    with invalid options.
    """

    def __init__(self, provider: Optional[Provider] = None, **options: Any):
        self.options = Options.create(provider, **options)
        self.class_names = self.options.class_names

        self.state = ControlState.IDLE
        self.input_value = ""
        self.active = False
        self.focused = False
        self.message: Optional[str] = None

        self.markers = MarkerSet(
            max_markers=self.options.max_markers,
            options=self.options.marker,
            popup_format=self.options.popup_format,
            show_popup=self.options.show_popup,
        )
        self.result_list: Optional[ResultList] = None
        self._dispatcher: Optional[QueryDispatcher] = None
        if self.options.auto_complete:
            self.result_list = ResultList()
            self._dispatcher = QueryDispatcher(
                self.options.provider,
                on_results=self._show_candidates,
                on_failure=self._search_failed,
                on_clear=self._clear_candidates,
                delay_ms=self.options.auto_complete_delay,
                on_dispatch=self._search_started,
            )

        self.map: Optional[HostMap] = None
        self._suspension: Optional[HandlerSuspension] = None
        self._centerer: Optional[ViewCenterer] = None
        self._message_handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        # Bumped by clear/remove; submits started before a bump are dropped
        self._epoch = 0

    # ── Host lifecycle ────────────────────────────────────────────

    def add_to(self, host: HostMap) -> SearchControl:
        if not isinstance(host, HostMap):
            raise ConfigurationError(
                f"{type(host).__name__} does not implement the host map interface"
            )
        opts = self.options
        self.map = host
        self._suspension = HandlerSuspension(host)
        self._centerer = ViewCenterer(
            host,
            self.markers,
            zoom_level=opts.zoom_level,
            retain_zoom_level=opts.retain_zoom_level,
            animate_zoom=opts.animate_zoom,
        )
        if opts.show_marker:
            self.markers.attach(host)
        return self

    def remove(self) -> SearchControl:
        """Detach from the host, handing back any suspended handlers."""
        if self._suspension is not None:
            self._suspension.restore()
        if self._dispatcher is not None:
            self._dispatcher.cancel()
        self._epoch += 1
        self._hide_message()
        self.markers.detach()
        self.map = None
        self._suspension = None
        self._centerer = None
        return self

    async def join(self) -> None:
        """Wait for in-flight searches and submits to settle."""
        if self._dispatcher is not None:
            await self._dispatcher.join()
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ── Form events ──────────────────────────────────────────────

    def on_key_up(self, key: str, text: str) -> None:
        """Input text changed; schedule an autocomplete search."""
        self.input_value = text
        if self._dispatcher is None or key in SPECIAL_KEYS:
            return
        self.state = ControlState.TYPING if text else ControlState.IDLE
        self._dispatcher.dispatch(text)

    def on_key_down(self, key: str) -> Optional[asyncio.Task]:
        """
        Escape clears; Enter commits; Up/Down walk the candidates.

        Returns the submit task when Enter commits.
        """
        if key == ESCAPE_KEY:
            self.clear_results(force=True)
            return None

        if key == ENTER_KEY:
            item = None
            if self.result_list is not None:
                item = self.result_list.select(self.result_list.selected)
            return self._spawn(
                self.submit(Selection(query=self.input_value, data=item))
            )

        if self.result_list is None:
            return None

        if key in NAVIGATION_KEYS:
            item = self.result_list.step(1 if key == ARROW_DOWN_KEY else -1)
            if item is not None:
                self.input_value = item.label
        return None

    def on_result_click(self, index: int) -> Optional[asyncio.Task]:
        if self.result_list is None:
            return None
        item = self.result_list.select(index)
        if item is None:
            return None
        self.input_value = item.label
        return self._spawn(self.submit(Selection(query=item.label, data=item)))

    def on_pointer_enter(self, inside: bool = True) -> None:
        if inside and self._suspension is not None:
            self._suspension.suspend()

    def on_pointer_leave(self, inside: bool = True) -> None:
        if inside and self._suspension is not None:
            self._suspension.restore()

    def on_activator_click(self) -> None:
        """Toggle the open state of the form."""
        if self.active:
            self.active = False
            self.focused = False
            self.clear_results(force=True)
        else:
            self.active = True
            self.focused = True

    # ── Commit ───────────────────────────────────────────────────

    async def submit(self, selection: Selection) -> Optional[Marker]:
        """
        Run the authoritative search for *selection* and show its best
        result. Returns the placed marker, or None when nothing was found.
        """
        if self.map is None:
            raise ConfigurationError("Control must be added to a map before submitting")
        epoch = self._epoch
        if self._dispatcher is not None:
            self._dispatcher.cancel()

        outcome = await search_outcome(self.options.provider, selection)
        if epoch != self._epoch:
            logger.debug("Dropping submit for '%s' after clear", selection.query)
            return None
        if outcome.best is None:
            self._search_failed(outcome)
            return None
        return self.show_result(outcome.best, selection)

    def show_result(self, result: SearchResult, selection: Selection) -> Marker:
        marker = self.markers.add(result, selection, events=self.map)
        self._centerer.center(result)

        self.map.fire(SHOWLOCATION_EVENT, {"location": result, "marker": marker})
        self.state = ControlState.COMMITTED
        logger.debug("Showing '%s' at %s", result.label, result.latlng)

        if self.options.auto_close:
            self.close_results()
        return marker

    # ── Clearing ─────────────────────────────────────────────────

    def clear_results(self, force: bool = False) -> None:
        """
        Drop candidates. Input text and markers go too unless
        ``keep_result`` is set and *force* is not.
        """
        self._epoch += 1
        if force or not self.options.keep_result:
            self.input_value = ""
            self.markers.clear()

        if self._dispatcher is not None:
            self._dispatcher.cancel()
            self.result_list.clear()
        self.state = ControlState.IDLE

    def close_results(self) -> None:
        self.active = False
        if self._suspension is not None:
            self._suspension.restore()
        self.clear_results()

    # ── Dispatcher callbacks ─────────────────────────────────────

    def _search_started(self, query: str) -> None:
        self.state = ControlState.AWAITING_RESULT

    def _show_candidates(self, outcome: SearchOutcome) -> None:
        self.result_list.render(outcome.results)
        if outcome.results:
            self.state = ControlState.SHOWING_CANDIDATES
        else:
            self.state = ControlState.IDLE
            self._show_message(self.options.not_found_message)

    def _search_failed(self, outcome: SearchOutcome) -> None:
        if self.result_list is not None:
            self.result_list.clear()
        self.state = ControlState.IDLE
        self._show_message(self.options.not_found_message)

    def _clear_candidates(self) -> None:
        self.result_list.clear()
        self.state = ControlState.IDLE

    # ── Message box ──────────────────────────────────────────────

    def _show_message(self, text: str) -> None:
        self._hide_message()
        self.message = text
        loop = asyncio.get_running_loop()
        self._message_handle = loop.call_later(
            self.options.message_hide_delay / 1000, self._hide_message
        )

    def _hide_message(self) -> None:
        if self._message_handle is not None:
            self._message_handle.cancel()
            self._message_handle = None
        self.message = None

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
