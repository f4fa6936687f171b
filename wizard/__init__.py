"""Wizard client module."""
from wizard.session import WizardSession
from wizard.client import ProgressSimulator, WizardClient, WizardError, prevalidate_photo

__all__ = [
    "WizardSession",
    "ProgressSimulator",
    "WizardClient",
    "WizardError",
    "prevalidate_photo",
]
