"""Per-finding detection state, keyed by finding id.

A single :class:`DetectionStore` belongs to a remediation session and is
shared by reference between the single-item resolver and the batch detector.
"""

from __future__ import annotations

from typing import Iterator

from a11ylocate.core.models import DetectionOutcome, DetectionState
from a11ylocate.errors import DetectionInProgressError


class DetectionStore:
    """Holds the detection lifecycle (idle / in progress / resolved) per finding."""

    def __init__(self) -> None:
        self._states: dict[str, DetectionState] = {}

    def __contains__(self, finding_id: object) -> bool:
        return finding_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def _state(self, finding_id: str) -> DetectionState:
        state = self._states.get(finding_id)
        if state is None:
            state = self._states[finding_id] = DetectionState()
        return state

    def begin(self, finding_id: str) -> None:
        """Mark detection as running and drop any previous result."""
        state = self._state(finding_id)
        if state.in_progress:
            raise DetectionInProgressError(finding_id)
        state.in_progress = True
        state.result = None

    def complete(self, finding_id: str, outcome: DetectionOutcome) -> None:
        """Record the terminal outcome of a detection run."""
        state = self._state(finding_id)
        state.in_progress = False
        state.result = outcome

    def toggle_preview(self, finding_id: str) -> bool:
        """Flip the preview flag for a finding and return its new value."""
        state = self._state(finding_id)
        state.show_preview = not state.show_preview
        return state.show_preview

    def read(self, finding_id: str) -> DetectionState:
        """Current state for ``finding_id``; an idle state if never detected."""
        state = self._states.get(finding_id)
        if state is None:
            return DetectionState()
        return DetectionState(state.in_progress, state.result, state.show_preview)

    def is_in_progress(self, finding_id: str) -> bool:
        state = self._states.get(finding_id)
        return state is not None and state.in_progress

    def result(self, finding_id: str) -> DetectionOutcome | None:
        state = self._states.get(finding_id)
        return state.result if state else None

    def items(self) -> Iterator[tuple[str, DetectionState]]:
        for finding_id in list(self._states):
            yield finding_id, self.read(finding_id)

    def snapshot(self) -> dict[str, DetectionState]:
        """Copy of every state, safe to hand to renderers."""
        return dict(self.items())

    def clear(self) -> None:
        self._states.clear()
