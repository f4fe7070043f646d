"""Placed result markers, bounded with first-in first-out eviction."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

from geosearch.models import LatLng, SearchResult, Selection
from geosearch.options import MarkerOptions, default_popup_format
from geosearch.view import LatLngBounds

logger = logging.getLogger(__name__)

DRAGEND_EVENT = "geosearch/marker/dragend"


class Marker:
    """A map marker with an optional popup and ``dragend`` listeners."""

    def __init__(self, latlng: LatLng, options: MarkerOptions):
        self.latlng = LatLng(*latlng)
        self.options = options
        self.popup: Optional[str] = None
        self.popup_open = False
        self._listeners: Dict[str, List[Callable[[dict], Any]]] = {}

    @property
    def draggable(self) -> bool:
        return self.options.draggable

    def bind_popup(self, label: str) -> None:
        self.popup = label

    def open_popup(self) -> None:
        if self.popup is not None:
            self.popup_open = True

    def on(self, event: str, callback: Callable[[dict], Any]) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def fire(self, event: str, payload: dict) -> None:
        for callback in list(self._listeners.get(event, [])):
            callback(payload)

    def drag_to(self, latlng: LatLng) -> None:
        """Move the marker as a finished user drag would."""
        if not self.draggable:
            return
        self.latlng = LatLng(*latlng)
        self.fire("dragend", {"target": self, "latlng": self.latlng})

    def __repr__(self) -> str:
        return f"Marker({self.latlng.lat}, {self.latlng.lng})"


class MarkerSet:
    """
    Markers placed for committed results.

    Never holds more than ``max_markers``; adding to a full set first
    removes the earliest-added marker.
    """

    def __init__(
        self,
        max_markers: int = 1,
        options: Optional[MarkerOptions] = None,
        popup_format: Callable[[Selection, SearchResult], str] = default_popup_format,
        show_popup: bool = False,
    ):
        if max_markers < 1:
            raise ValueError("max_markers must be >= 1")
        self._max = max_markers
        self._options = options or MarkerOptions()
        self._popup_format = popup_format
        self._show_popup = show_popup
        self._markers: Deque[Marker] = deque()
        self._host = None

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self):
        return iter(tuple(self._markers))

    def count(self) -> int:
        return len(self._markers)

    @property
    def markers(self) -> Tuple[Marker, ...]:
        return tuple(self._markers)

    # ── Host attachment ──────────────────────────────────────────

    def attach(self, host) -> None:
        """Show current and future markers on *host*."""
        self._host = host
        for marker in self._markers:
            host.add_layer(marker)

    def detach(self) -> None:
        host, self._host = self._host, None
        if host is None:
            return
        for marker in self._markers:
            host.remove_layer(marker)

    # ── Mutation ─────────────────────────────────────────────────

    def add(self, result: SearchResult, selection: Selection, events=None) -> Marker:
        """
        Place a marker for *result*, evicting the oldest one if full.

        *events* is the object whose ``fire`` receives the
        ``geosearch/marker/dragend`` event for draggable markers.
        """
        while len(self._markers) >= self._max:
            evicted = self._markers.popleft()
            self._remove_from_host(evicted)
            logger.debug("Evicted %r", evicted)

        marker = Marker(result.latlng, self._options)
        label = result.label
        if callable(self._popup_format):
            label = self._popup_format(selection, result)
        marker.bind_popup(label)

        self._markers.append(marker)
        if self._host is not None:
            self._host.add_layer(marker)

        if self._show_popup:
            marker.open_popup()

        if marker.draggable and events is not None:
            marker.on(
                "dragend",
                lambda args: events.fire(
                    DRAGEND_EVENT, {"location": marker.latlng, "event": args}
                ),
            )

        return marker

    def clear(self) -> None:
        while self._markers:
            self._remove_from_host(self._markers.popleft())

    def bounds(self) -> LatLngBounds:
        return LatLngBounds.from_points(m.latlng for m in self._markers)

    def _remove_from_host(self, marker: Marker) -> None:
        if self._host is not None:
            self._host.remove_layer(marker)
