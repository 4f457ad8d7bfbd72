# maintdesk/navigation.py
from dataclasses import dataclass
from enum import Enum


class View(str, Enum):
    FORM = "form"
    REQUESTS = "requests"


VIEW_PATHS = {
    View.FORM: "/requests/new",
    View.REQUESTS: "/requests",
}


class InvalidTransition(ValueError):
    pass


@dataclass(frozen=True)
class Navigator:
    """Two-state view switch. Starts on the request list."""
    view: View = View.REQUESTS

    @property
    def path(self) -> str:
        return VIEW_PATHS[self.view]

    def to_form(self) -> "Navigator":
        if self.view is not View.REQUESTS:
            raise InvalidTransition(f"cannot open the form from {self.view.value}")
        return Navigator(View.FORM)

    def to_requests(self) -> "Navigator":
        if self.view is not View.FORM:
            raise InvalidTransition(f"cannot return to requests from {self.view.value}")
        return Navigator(View.REQUESTS)
