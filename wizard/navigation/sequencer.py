"""Step position tracking for the order wizard."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping

from core.errors import InvalidSelectionError
from wizard.navigation.keys import WizardSessionKeys
from wizard.step_registry import ORDER_STEPS, StepDefinition, step_at

logger = logging.getLogger(__name__)


class StepSequencer:
    """Track the visible step and the furthest step reached.

    Positions are 1-based. ``max_position`` never decreases, so navigating
    back keeps the record of how far the user already got. State lives in
    ``store`` under a namespaced key so several wizards can share one
    Streamlit session state.
    """

    def __init__(
        self,
        *,
        keys: WizardSessionKeys,
        store: MutableMapping[str, object] | None = None,
        step_count: int = len(ORDER_STEPS),
    ) -> None:
        self._keys = keys
        self._store: MutableMapping[str, object] = store if store is not None else {}
        self._step_count = step_count
        self._state()

    def _state(self) -> dict[str, int]:
        raw = self._store.get(self._keys.navigation_state)
        if isinstance(raw, dict) and isinstance(raw.get("current"), int) and isinstance(raw.get("max"), int):
            return raw
        state = {"current": 1, "max": 1}
        self._store[self._keys.navigation_state] = state
        return state

    @property
    def current_position(self) -> int:
        return self._state()["current"]

    @property
    def max_position(self) -> int:
        return self._state()["max"]

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def active_index(self) -> int:
        """0-based index for the stepper widget."""

        return self.current_position - 1

    @property
    def current_step(self) -> StepDefinition:
        return step_at(self.current_position)

    @property
    def is_last(self) -> bool:
        return self.current_position >= self._step_count

    def advance(self) -> int:
        """Move one step forward and return the new position."""

        state = self._state()
        if state["current"] >= self._step_count:
            logger.debug("Already on the last step (%s); not advancing.", state["current"])
            return state["current"]
        state["current"] += 1
        state["max"] = max(state["max"], state["current"])
        return state["current"]

    def retreat(self) -> int:
        """Move one step back (never before the first) and return the position."""

        state = self._state()
        state["current"] = max(1, state["current"] - 1)
        return state["current"]

    def go_to(self, position: int) -> int:
        """Jump to an already reached ``position``."""

        state = self._state()
        if position < 1 or position > state["max"]:
            raise InvalidSelectionError(f"Step {position} has not been reached yet (furthest: {state['max']}).")
        state["current"] = position
        return position

    def reset(self) -> None:
        self._store[self._keys.navigation_state] = {"current": 1, "max": 1}

    def discard(self) -> None:
        """Drop the stored state entirely (used on session teardown)."""

        self._store.pop(self._keys.navigation_state, None)
