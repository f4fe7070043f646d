"""geosearch — Interactive geocoding search control for map applications."""

from geosearch.control import ControlState, SearchControl
from geosearch.exceptions import (
    ConfigurationError,
    GeoSearchError,
    ProviderError,
)
from geosearch.handlers import HandlerSuspension, MapHandler
from geosearch.markers import Marker, MarkerSet
from geosearch.models import LatLng, SearchOutcome, SearchResult, Selection
from geosearch.options import ClassNames, MarkerOptions, Options
from geosearch.results import ResultList
from geosearch.view import LatLngBounds, ViewCenterer

__all__ = [
    "SearchControl",
    "ControlState",
    "Options",
    "ClassNames",
    "MarkerOptions",
    "SearchResult",
    "Selection",
    "SearchOutcome",
    "LatLng",
    "LatLngBounds",
    "ResultList",
    "Marker",
    "MarkerSet",
    "MapHandler",
    "HandlerSuspension",
    "ViewCenterer",
    "GeoSearchError",
    "ConfigurationError",
    "ProviderError",
]
