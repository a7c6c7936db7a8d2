"""Backend integrations for the order workflow."""

from .backend import Attachment, BackendClient

__all__ = ["Attachment", "BackendClient"]
