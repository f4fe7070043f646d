"""Shared test fixtures — a recording host map and a scripted provider."""

import asyncio
from typing import Dict, List, Optional, Sequence

import pytest

from geosearch.models import SearchResult, Selection

PARIS = SearchResult(label="Paris, France", x=2.35, y=48.85, bounds=None)
LYON = SearchResult(
    label="Lyon, France",
    x=4.83,
    y=45.76,
    bounds=((45.70, 4.77), (45.81, 4.90)),
)
NICE = SearchResult(label="Nice, France", x=7.26, y=43.70)


class FakeHandler:
    """A gesture handler that counts its enable/disable calls."""

    def __init__(self, enabled: bool = True):
        self._enabled = enabled
        self.calls: List[str] = []

    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self.calls.append("enable")
        self._enabled = True

    def disable(self) -> None:
        self.calls.append("disable")
        self._enabled = False


class FakeMap:
    """Host map that records every call the control makes."""

    def __init__(self, zoom: float = 5, boxZoom: bool = True):
        self.zoom = zoom
        self.dragging = FakeHandler(True)
        self.touchZoom = FakeHandler(True)
        self.doubleClickZoom = FakeHandler(True)
        self.scrollWheelZoom = FakeHandler(True)
        self.boxZoom = FakeHandler(boxZoom)
        self.keyboard = FakeHandler(True)
        self.events: List[tuple] = []
        self.views: List[tuple] = []
        self.layers: List[object] = []

    def fire(self, event: str, payload: dict) -> None:
        self.events.append((event, payload))

    def fit_bounds(self, bounds, animate: bool = True) -> None:
        self.views.append(("fit", bounds, animate))

    def set_view(self, center, zoom, animate: bool = True) -> None:
        self.views.append(("view", tuple(center), zoom, animate))

    def get_zoom(self) -> float:
        return self.zoom

    def add_layer(self, layer) -> None:
        self.layers.append(layer)

    def remove_layer(self, layer) -> None:
        self.layers.remove(layer)

    def fired(self, name: str) -> List[dict]:
        return [payload for event, payload in self.events if event == name]


class ScriptedProvider:
    """
    Async provider answering from a fixed table.

    *delays* holds per-query latency in seconds; *fail* lists queries
    that raise.
    """

    def __init__(
        self,
        answers: Optional[Dict[str, Sequence[SearchResult]]] = None,
        delays: Optional[Dict[str, float]] = None,
        fail: Sequence[str] = (),
    ):
        self.answers = answers or {}
        self.delays = delays or {}
        self.fail = set(fail)
        self.queries: List[str] = []

    async def search(self, selection: Selection) -> List[SearchResult]:
        self.queries.append(selection.query)
        await asyncio.sleep(self.delays.get(selection.query, 0))
        if selection.query in self.fail:
            raise RuntimeError("service unavailable")
        if selection.query in self.answers:
            return list(self.answers[selection.query])
        # A committed candidate is searched again by its label
        return [
            result
            for results in self.answers.values()
            for result in results
            if result.label == selection.query
        ][:1]


@pytest.fixture()
def host() -> FakeMap:
    return FakeMap()


@pytest.fixture()
def provider() -> ScriptedProvider:
    return ScriptedProvider(
        answers={
            "Paris": [PARIS],
            "Lyon": [LYON],
            "Nice": [NICE],
            "France": [PARIS, LYON, NICE],
        }
    )
