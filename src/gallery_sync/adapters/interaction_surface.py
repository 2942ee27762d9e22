"""Surfaces that show the picker page to the user."""

import logging
import webbrowser
from dataclasses import dataclass
from typing import Protocol

_logger = logging.getLogger(__name__)


class InteractionSurface(Protocol):
    """Somewhere the user can complete a picker session."""

    def open(self, uri: str) -> None:
        """Present the picker URI to the user."""


@dataclass
class HandoffInteractionSurface(InteractionSurface):
    """Keep the URI for the hosting UI to open in its own popup."""

    last_uri: str | None = None

    def open(self, uri: str) -> None:
        """Record the URI for the UI to pick up."""
        self.last_uri = uri
        _logger.info("Picker ready for the user at %s", uri)


@dataclass
class BrowserInteractionSurface(InteractionSurface):
    """Open the picker in a new browser window on this machine."""

    def open(self, uri: str) -> None:
        """Open the URI with the default browser."""
        if not webbrowser.open_new(uri):
            _logger.warning("No browser available to open %s", uri)
