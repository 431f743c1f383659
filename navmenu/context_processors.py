"""
Context processors for navmenu.

Exposes every configured menu to templates, activated against the current
request, so navigation can be rendered from a single source of truth.
"""

from collections.abc import Mapping

from .conf import get_menu_configurations
from .menu import Menu
from .request import ActionRequest


class LazyMenus(Mapping):
    """Builds each named menu on first access and caches it for the request."""

    def __init__(self, request, configurations):
        self._request = request
        self._configurations = configurations
        self._action_request = None
        self._menus = {}

    def __getitem__(self, name):
        if name not in self._menus:
            configuration = self._configurations[name]
            if self._action_request is None:
                self._action_request = ActionRequest.from_http_request(self._request)
            self._menus[name] = Menu(self._action_request, configuration)
        return self._menus[name]

    def __iter__(self):
        return iter(self._configurations)

    def __len__(self):
        return len(self._configurations)


def menus(request):
    """
    Add navigation menus to the template context.

    Returns a dictionary with a ``menus`` key mapping each configured menu
    name to a ``Menu`` built for *request*.
    """
    return {
        "menus": LazyMenus(request, get_menu_configurations()),
    }
