"""Autocomplete candidate list with a selection cursor."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from geosearch.models import SearchResult

NO_SELECTION = -1


class ResultList:
    """
    Ordered candidates, most relevant first, plus the selected index.

    ``selected`` is -1 when nothing is selected. Every ``render``
    replaces the contents wholesale.
    """

    def __init__(self) -> None:
        self._results: Tuple[SearchResult, ...] = ()
        self._selected = NO_SELECTION

    @property
    def results(self) -> Tuple[SearchResult, ...]:
        return self._results

    @property
    def selected(self) -> int:
        return self._selected

    def count(self) -> int:
        return len(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def render(self, results: Sequence[SearchResult]) -> None:
        self._results = tuple(results or ())
        self._selected = NO_SELECTION

    def clear(self) -> None:
        self._results = ()
        self._selected = NO_SELECTION

    def select(self, index: int) -> Optional[SearchResult]:
        """
        Move the cursor to *index* and return the item there.

        Returns None when *index* is out of range, including -1; the
        cursor is still moved (clamped to -1 for out-of-range values).
        """
        if 0 <= index < len(self._results):
            self._selected = index
            return self._results[index]
        self._selected = NO_SELECTION
        return None

    def step(self, delta: int) -> Optional[SearchResult]:
        """
        Move the cursor by *delta*, wrapping at both ends.

        From no selection, +1 lands on the first item and -1 on the
        last. A no-op returning None on an empty list.
        """
        last = len(self._results) - 1
        if last < 0:
            return None

        nxt = self._selected + delta
        if nxt < 0:
            nxt = last
        elif nxt > last:
            nxt = 0
        return self.select(nxt)
