"""Navigation helpers for the order wizard."""

from __future__ import annotations

from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.sequencer import StepSequencer

__all__ = ["StepSequencer", "WizardSessionKeys"]
