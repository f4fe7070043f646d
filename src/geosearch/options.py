"""Control configuration: defaults, merging and validation."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Mapping, Optional

from geosearch.exceptions import ConfigurationError
from geosearch.interfaces import Provider
from geosearch.models import SearchResult, Selection

POSITIONS = ("topleft", "topright", "bottomleft", "bottomright")
STYLES = ("button", "bar")


def default_popup_format(query: Selection, result: SearchResult) -> str:
    return f"{result.label}"


@dataclass(frozen=True)
class ClassNames:
    """CSS class names handed to whatever renders the form."""

    container: str = "leaflet-bar leaflet-control leaflet-control-geosearch"
    button: str = "leaflet-bar-part leaflet-bar-part-single"
    reset_button: str = "reset"
    msgbox: str = "leaflet-bar message"
    form: str = ""
    input: str = ""


@dataclass(frozen=True)
class MarkerOptions:
    draggable: bool = False
    icon: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Options:
    """
    Immutable control configuration.

    Build with ``Options.create(provider, **partial)``, which merges the
    caller's options over the defaults below and validates the result.
    """

    provider: Provider
    position: str = "topleft"
    style: str = "button"
    show_marker: bool = True
    show_popup: bool = False
    popup_format: Callable[[Selection, SearchResult], str] = (
        default_popup_format
    )
    marker: MarkerOptions = field(default_factory=MarkerOptions)
    max_markers: int = 1
    retain_zoom_level: bool = False
    animate_zoom: bool = True
    search_label: str = "Enter address"
    not_found_message: str = "Sorry, that address could not be found."
    message_hide_delay: int = 3000     # ms
    zoom_level: int = 18
    class_names: ClassNames = field(default_factory=ClassNames)
    auto_complete: bool = True
    auto_complete_delay: int = 250     # ms
    auto_close: bool = False
    keep_result: bool = False

    @classmethod
    def create(cls, provider: Optional[Provider] = None, **partial: Any) -> Options:
        """
        Merge *partial* over the defaults.

        ``class_names`` and ``marker`` may be given as mappings; they are
        merged field by field over their own defaults. The container
        class name gets ``geosearch-<style>`` appended once.

        Raises ConfigurationError on a missing provider, unknown option
        names or invalid values.
        """
        if provider is None:
            raise ConfigurationError("Provider is missing from options")
        if not callable(getattr(provider, "search", None)):
            raise ConfigurationError(
                f"Provider {provider!r} has no callable 'search'"
            )

        known = {f.name for f in fields(cls)} - {"provider"}
        unknown = set(partial) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown options: {', '.join(sorted(unknown))}"
            )

        partial["class_names"] = _merge(
            ClassNames, partial.get("class_names")
        )
        partial["marker"] = _merge(MarkerOptions, partial.get("marker"))

        options = cls(provider=provider, **partial)
        options._validate()

        names = options.class_names
        return replace(
            options,
            class_names=replace(
                names,
                container=f"{names.container} geosearch-{options.style}",
            ),
        )

    def _validate(self) -> None:
        if self.style not in STYLES:
            raise ConfigurationError(
                f"style must be one of {STYLES}, got '{self.style}'"
            )
        if self.position not in POSITIONS:
            raise ConfigurationError(
                f"position must be one of {POSITIONS}, got '{self.position}'"
            )
        if (
            isinstance(self.max_markers, bool)
            or not isinstance(self.max_markers, int)
            or self.max_markers < 1
        ):
            raise ConfigurationError(
                f"max_markers must be an integer >= 1, got {self.max_markers!r}"
            )
        for name in ("message_hide_delay", "auto_complete_delay"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(
                    f"{name} must be a number of milliseconds, got {value!r}"
                )
            if value < 0:
                raise ConfigurationError(f"{name} must not be negative")
        if not callable(self.popup_format):
            raise ConfigurationError("popup_format must be callable")


def _merge(kind: type, value: Any) -> Any:
    """Overlay a mapping (or ready-made instance) on *kind*'s defaults."""
    if value is None:
        return kind()
    if isinstance(value, kind):
        return value
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"{kind.__name__} must be a mapping, got {type(value).__name__}"
        )
    allowed = {f.name for f in fields(kind)}
    unknown = set(value) - allowed
    if unknown:
        raise ConfigurationError(
            f"Unknown {kind.__name__} fields: {', '.join(sorted(unknown))}"
        )
    return kind(**value)
