"""Recentering the host map on a selected result."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from geosearch.models import BoundsPairs, LatLng, SearchResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatLngBounds:
    """Axis-aligned lat/lng box. An empty box is invalid."""

    south_west: Optional[LatLng] = None
    north_east: Optional[LatLng] = None

    @classmethod
    def from_pairs(cls, pairs: Optional[BoundsPairs]) -> LatLngBounds:
        """
        Build from ``((lat, lng), (lat, lng))`` corner pairs in any order.

        Missing or malformed input gives an invalid (empty) box.
        """
        if not pairs:
            return cls()
        try:
            points = [LatLng(float(lat), float(lng)) for lat, lng in pairs]
        except (TypeError, ValueError):
            return cls()
        return cls.from_points(points)

    @classmethod
    def from_points(cls, points: Iterable[LatLng]) -> LatLngBounds:
        bounds = cls()
        for point in points:
            bounds = bounds.extend(point)
        return bounds

    def extend(self, point: LatLng) -> LatLngBounds:
        lat, lng = point
        if any(math.isnan(v) for v in (lat, lng)):
            return self
        if self.south_west is None or self.north_east is None:
            return LatLngBounds(LatLng(lat, lng), LatLng(lat, lng))
        return LatLngBounds(
            LatLng(min(self.south_west.lat, lat), min(self.south_west.lng, lng)),
            LatLng(max(self.north_east.lat, lat), max(self.north_east.lng, lng)),
        )

    @property
    def is_valid(self) -> bool:
        return self.south_west is not None and self.north_east is not None

    @property
    def center(self) -> LatLng:
        if not self.is_valid:
            raise ValueError("Empty bounds have no center")
        return LatLng(
            (self.south_west.lat + self.north_east.lat) / 2,
            (self.south_west.lng + self.north_east.lng) / 2,
        )


class ViewCenterer:
    """
    Moves the host view to a selected result.

    Fallback order: the result's own bounds, then the combined bounds of
    the placed markers, then the bare point at the configured zoom.
    """

    def __init__(
        self,
        host,
        markers,
        zoom_level: int = 18,
        retain_zoom_level: bool = False,
        animate_zoom: bool = True,
    ):
        self._host = host
        self._markers = markers
        self._zoom_level = zoom_level
        self._retain_zoom_level = retain_zoom_level
        self._animate = animate_zoom

    def zoom(self) -> float:
        """Zoom for point-style centering."""
        if self._retain_zoom_level:
            return self._host.get_zoom()
        return self._zoom_level

    def center(self, result: SearchResult) -> None:
        result_bounds = LatLngBounds.from_pairs(result.bounds)

        if result_bounds.is_valid:
            if self._retain_zoom_level:
                self._host.set_view(
                    result_bounds.center,
                    self._host.get_zoom(),
                    animate=self._animate,
                )
            else:
                self._host.fit_bounds(result_bounds, animate=self._animate)
            return

        marker_bounds = self._markers.bounds()
        if marker_bounds.is_valid:
            target = marker_bounds.center
        else:
            logger.debug("No bounds for '%s'; centering on point", result.label)
            target = result.latlng
        self._host.set_view(target, self.zoom(), animate=self._animate)
