from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WizardSessionKeys:
    """Namespaced session-state keys for one order wizard instance."""

    wizard_id: str

    @property
    def prefix(self) -> str:
        return f"wiz:{self.wizard_id}:"

    def namespace(self, key: str) -> str:
        return f"{self.prefix}{key}"

    @property
    def navigation_state(self) -> str:
        return self.namespace("navigation_state")

    @property
    def session(self) -> str:
        return self.namespace("session")

    def widget(self, ui_key: str) -> str:
        """Return a widget key that cannot collide with another wizard's."""

        return self.namespace(ui_key)
