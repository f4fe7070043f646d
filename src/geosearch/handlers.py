"""Suspension of the host map's gesture handlers while the form has the pointer."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, Optional

from geosearch.interfaces import GestureHandler

logger = logging.getLogger(__name__)


class MapHandler(str, Enum):
    """Gesture handlers the control switches off. Values are host attribute names."""

    DRAGGING = "dragging"
    TOUCH_ZOOM = "touchZoom"
    DOUBLE_CLICK_ZOOM = "doubleClickZoom"
    SCROLL_WHEEL_ZOOM = "scrollWheelZoom"
    BOX_ZOOM = "boxZoom"
    KEYBOARD = "keyboard"


class HandlerSuspension:
    """
    Snapshot, disable and later restore the host map's gesture handlers.

    Single depth: while a snapshot is outstanding, further ``suspend``
    calls are ignored so the original enabled states are never
    overwritten by the already-disabled ones.
    """

    def __init__(self, host: object):
        self._host = host
        self._snapshot: Optional[Dict[MapHandler, bool]] = None

    @property
    def active(self) -> bool:
        return self._snapshot is not None

    def _handler(self, handler: MapHandler) -> Optional[GestureHandler]:
        # Absent capability on this host
        return getattr(self._host, handler.value, None)

    def suspend(self) -> bool:
        """
        Record each handler's enabled state, then disable it.

        Returns False when a snapshot is already outstanding.
        """
        if self._snapshot is not None:
            logger.debug("Handlers already suspended; keeping snapshot")
            return False

        snapshot: Dict[MapHandler, bool] = {}
        for handler in MapHandler:
            target = self._handler(handler)
            if target is None:
                continue
            snapshot[handler] = bool(target.enabled())
            target.disable()

        self._snapshot = snapshot
        logger.debug("Suspended map handlers: %s", snapshot)
        return True

    def restore(self) -> None:
        """Re-enable the handlers that were enabled at ``suspend`` time."""
        snapshot, self._snapshot = self._snapshot, None
        if snapshot is None:
            return

        for handler, was_enabled in snapshot.items():
            if not was_enabled:
                continue
            target = self._handler(handler)
            if target is not None:
                target.enable()
        logger.debug("Restored map handlers")

    @contextmanager
    def suspended(self) -> Iterator[HandlerSuspension]:
        """Suspend for the duration of the block, restoring on any exit."""
        owned = self.suspend()
        try:
            yield self
        finally:
            if owned:
                self.restore()
