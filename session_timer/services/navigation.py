"""Client navigation location, as reported by the app, and replace-navigation."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class NavigatorPort(Protocol):
    @property
    def current_route(self) -> str: ...

    def replace(self, route: str) -> None: ...


class Navigator:
    """Tracks the route the client is on; replace() swaps it rather than stacking a new one."""

    def __init__(self, initial_route: str = "/") -> None:
        self._route = initial_route

    @property
    def current_route(self) -> str:
        return self._route

    def set_current_route(self, route: str) -> None:
        self._route = route

    def replace(self, route: str) -> None:
        logger.info("Navigating (replace) %s -> %s", self._route, route)
        self._route = route
