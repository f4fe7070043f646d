"""
Interfaces the search control consumes from its collaborators.

The control never geocodes and never renders; it talks to a provider
and to the host map only through these protocols.
"""

from __future__ import annotations

from typing import (
    Any,
    Awaitable,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)

from geosearch.models import LatLng, SearchResult, Selection


class Provider(Protocol):
    """Geocoding backend: search text in, ranked candidates out."""

    def search(
        self, selection: Selection
    ) -> Union[
        Awaitable[Sequence[SearchResult]], Sequence[SearchResult]
    ]:
        """Return candidates for *selection.query*, best first."""
        ...


class GestureHandler(Protocol):
    """A host map interaction handler that can be switched on and off."""

    def enabled(self) -> bool: ...

    def enable(self) -> Any: ...

    def disable(self) -> Any: ...


@runtime_checkable
class HostMap(Protocol):
    """The map the control is added to."""

    def fire(self, event: str, payload: dict) -> Any: ...

    def fit_bounds(self, bounds: Any, animate: bool = True) -> Any: ...

    def set_view(
        self, center: LatLng, zoom: float, animate: bool = True
    ) -> Any: ...

    def get_zoom(self) -> float: ...

    def add_layer(self, layer: Any) -> Any: ...

    def remove_layer(self, layer: Any) -> Any: ...
