"""Formatting service exposed to hosts."""

from fantomas_client.core.formatting.service import FormattingService

__all__ = ["FormattingService"]
