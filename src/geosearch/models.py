"""Typed models shared by the search control."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional, Sequence, Tuple

# ((south, west), (north, east)) in lat/lng order
BoundsPairs = Tuple[Tuple[float, float], Tuple[float, float]]


class LatLng(NamedTuple):
    lat: float
    lng: float


@dataclass(frozen=True)
class SearchResult:
    """One candidate returned by a provider."""

    label: str
    x: float                 # longitude
    y: float                 # latitude
    bounds: Optional[BoundsPairs] = None
    raw: Any = field(default=None, compare=False)

    @property
    def latlng(self) -> LatLng:
        return LatLng(self.y, self.x)


@dataclass(frozen=True)
class Selection:
    """The text the user committed, plus the candidate it came from."""

    query: str
    data: Optional[SearchResult] = None


@dataclass(frozen=True)
class SearchOutcome:
    """
    Result of one provider call: either a sequence of candidates or a
    failure reason. Failures are values here, never raised.
    """

    results: Tuple[SearchResult, ...] = ()
    error: Optional[Exception] = None

    @classmethod
    def success(cls, results: Sequence[SearchResult]) -> SearchOutcome:
        return cls(results=tuple(results or ()))

    @classmethod
    def failure(cls, error: Exception) -> SearchOutcome:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def best(self) -> Optional[SearchResult]:
        """First result, which providers rank as the most relevant."""
        return self.results[0] if self.results else None
