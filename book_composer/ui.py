# book_composer/ui.py
"""
Stand-ins for the two UI services the composer screen talks to:
blocking alerts and the app router.
"""
import logging
from typing import List

from pydantic import BaseModel

logger = logging.getLogger(__name__)

HOME_ROUTE = "/"


class Notice(BaseModel):
    title: str
    message: str


class Alerts:
    """Collects the alerts raised by a screen, oldest first."""

    def __init__(self) -> None:
        self.notices: List[Notice] = []

    def alert(self, title: str, message: str) -> Notice:
        notice = Notice(title=title, message=message)
        logger.info(f"Alert: {title} - {message}")
        self.notices.append(notice)
        return notice

    def dismiss_all(self) -> None:
        self.notices.clear()


class Navigator:
    def __init__(self, initial_route: str = "/create") -> None:
        self.history: List[str] = [initial_route]

    @property
    def current_route(self) -> str:
        return self.history[-1]

    def push(self, route: str) -> None:
        logger.info(f"Navigating to {route}")
        self.history.append(route)
