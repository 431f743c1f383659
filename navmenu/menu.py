"""
Hierarchical navigation menus built from configuration.

A ``Menu`` turns a nested configuration into a tree of ``MenuItem`` objects
and marks the items whose target matches the current ``ActionRequest`` as
active. Each item is one of:

  - a *separator*: empty label
  - a *header*: a label but no target package (a non-clickable group label)
  - a routable item: label and target package

Items with sub menu items only need a matching package and controller to be
active; leaf items also need a matching action and arguments. Activation
cascades from a matching parent into its children, each of which is matched
on its own.
"""

import logging
from dataclasses import dataclass, field

from django.urls import NoReverseMatch

from .conf import get_action_separator
from .persistence import get_identity_normalizer
from .request import DEFAULT_ACTION_NAME, reverse_with_query
from .utils import sort_keys_recursively

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuItemConfig:
    """One parsed menu item configuration entry."""
    label: str = ""
    package: str = None
    controller: str = None
    action: str = DEFAULT_ACTION_NAME
    arguments: dict = field(default_factory=dict)
    icon: str = None
    badge: str = None
    menu_items: tuple = None

    @classmethod
    def from_dict(cls, data):
        """
        Extract the known keys of *data* with their defaults.

        Nothing is validated: a missing label gives a separator, a missing
        package a header. An explicit ``"action": None`` is kept so that the
        item is matched on package and controller only.
        """
        children = data.get("menuItems")
        return cls(
            label=data.get("label") or "",
            package=data.get("package"),
            controller=data.get("controller"),
            action=data.get("action", DEFAULT_ACTION_NAME),
            arguments=dict(data.get("arguments") or {}),
            icon=data.get("icon"),
            badge=data.get("badge"),
            menu_items=None if children is None else tuple(children),
        )


class MenuItem:
    """A single menu entry, header or separator."""

    def __init__(
        self,
        label,
        target_package_key=None,
        target_controller_name=None,
        target_action_name=None,
        target_action_arguments=None,
        icon=None,
        badge=None,
        *,
        identity_normalizer=None,
        key_sorter=None,
    ):
        """
        :param label: if empty, the item is a separator
        :param target_package_key: if omitted, the item is a header
        :param target_action_name: if omitted, package and controller decide activation
        :param icon: optional icon identifier for the template
        :param badge: optional badge text for the template
        """
        self._label = label
        self._target_package_key = target_package_key
        self._target_controller_name = target_controller_name
        self._target_action_name = target_action_name
        self._target_action_arguments = dict(target_action_arguments or {})
        self._icon = icon
        self._badge = badge
        self._identity_normalizer = identity_normalizer
        self._key_sorter = key_sorter or sort_keys_recursively
        self._active = False
        self._sub_menu_items = []

    def __repr__(self):
        return (
            f"<MenuItem {self._label!r} -> {self._target_package_key}:"
            f"{self._target_controller_name}/{self._target_action_name}"
            f"{' active' if self._active else ''}>"
        )

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def activate_for_request(self, action_request):
        """
        Set this item (and its sub items) active if it matches *action_request*.

        Headers and separators are never active and their sub items are not
        visited. A matching item re-evaluates every sub item against the same
        request.
        """
        if self.is_header() or self.is_separator():
            return
        if not self.matches_request(action_request):
            return
        self._active = True
        logger.debug("Activated %r", self)
        for sub_menu_item in self._sub_menu_items:
            sub_menu_item.activate_for_request(action_request)

    def matches_request(self, action_request):
        """Return True if *action_request* points to the target of this item."""
        # for items with sub items a matching controller is enough
        if self.has_sub_menu_items() or self._target_action_name is None:
            return (
                self._target_package_key == action_request.controller_package_key
                and self._target_controller_name == action_request.controller_name
            )

        if self._target_package_key != action_request.controller_package_key:
            return False
        if self._target_controller_name != action_request.controller_name:
            return False
        if self._target_action_name != action_request.controller_action_name:
            return False

        target_arguments = self._sort_keys(self._normalize(self._target_action_arguments))
        request_arguments = self._sort_keys(dict(action_request.arguments or {}))
        return _strict_equal(target_arguments, request_arguments)

    def _normalize(self, arguments):
        normalizer = self._identity_normalizer or get_identity_normalizer()
        return normalizer(arguments)

    def _sort_keys(self, arguments):
        # sorters that work in place return None
        sorted_arguments = self._key_sorter(arguments)
        return arguments if sorted_arguments is None else sorted_arguments

    # ------------------------------------------------------------------
    # Kind
    # ------------------------------------------------------------------

    def is_header(self):
        return self._target_package_key is None and self._label != ""

    def is_separator(self):
        return self._label == ""

    def is_active(self):
        return self._active

    # ------------------------------------------------------------------
    # Sub menu items
    # ------------------------------------------------------------------

    @property
    def sub_menu_items(self):
        return self._sub_menu_items

    def set_sub_menu_items(self, sub_menu_items):
        self._sub_menu_items = list(sub_menu_items)

    def add_sub_menu_item(self, sub_menu_item):
        """Append *sub_menu_item*; returns self for chaining."""
        self._sub_menu_items.append(sub_menu_item)
        return self

    def has_sub_menu_items(self):
        return bool(self._sub_menu_items)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def label(self):
        return self._label

    @property
    def icon(self):
        return self._icon

    @property
    def badge(self):
        return self._badge

    @property
    def target_package_key(self):
        return self._target_package_key

    @property
    def target_controller_name(self):
        return self._target_controller_name

    @property
    def target_action_name(self):
        return self._target_action_name

    @property
    def target_action_arguments(self):
        return self._target_action_arguments

    def _view_names(self):
        if self.is_header() or self.is_separator() or not self._target_controller_name:
            return []
        prefix = f"{self._target_package_key}:{self._target_controller_name}"
        action = self._target_action_name or DEFAULT_ACTION_NAME
        names = [f"{prefix}{get_action_separator()}{action}"]
        # "dashboard" resolves to the default action, so reverse it that way too
        if action == DEFAULT_ACTION_NAME:
            names.append(prefix)
        return names

    @property
    def view_name(self):
        """Django view name of the target, e.g. ``"inventory:assets_list"``."""
        names = self._view_names()
        return names[0] if names else None

    @property
    def href(self):
        """URL of the target, or None if it cannot be reversed.

        Arguments the URL pattern does not take go into the query string.
        """
        names = self._view_names()
        if not names:
            return None
        kwargs = self._normalize(self._target_action_arguments)
        for name in names:
            try:
                return reverse_with_query(name, kwargs)
            except NoReverseMatch:
                continue
        logger.warning(
            "Could not reverse %s with arguments %r for menu item %r",
            " or ".join(names),
            self._target_action_arguments,
            self._label,
        )
        return None


def _strict_equal(left, right):
    """Structural equality that also requires equal types (``5`` is not ``"5"``)."""
    if type(left) is not type(right):
        return False
    if isinstance(left, dict):
        if left.keys() != right.keys():
            return False
        return all(_strict_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(_strict_equal(a, b) for a, b in zip(left, right))
    return left == right


class Menu:
    """Top-level, ordered collection of menu items for one request."""

    def __init__(self, action_request, configuration=None, *, identity_normalizer=None, key_sorter=None):
        """
        :param action_request: the ``ActionRequest`` items are activated against
        :param configuration: ``{"menuItems": [{"label": ..., "package": ..., "menuItems": [...]}, ...]}``
        """
        self._action_request = action_request
        self._identity_normalizer = identity_normalizer
        self._key_sorter = key_sorter
        self._menu_items = []
        if configuration is not None and "menuItems" in configuration:
            self._menu_items = self.create_menu_items(configuration["menuItems"])
            self.set_active_menu_items()

    def __iter__(self):
        return iter(self._menu_items)

    def __len__(self):
        return len(self._menu_items)

    def create_menu_items(self, menu_items_configuration):
        """Recursively create menu items (and sub items) from configuration."""
        menu_items = []
        for entry in menu_items_configuration or ():
            config = MenuItemConfig.from_dict(entry)
            menu_item = MenuItem(
                config.label,
                config.package,
                config.controller,
                config.action,
                config.arguments,
                config.icon,
                config.badge,
                identity_normalizer=self._identity_normalizer,
                key_sorter=self._key_sorter,
            )
            if config.menu_items is not None:
                menu_item.set_sub_menu_items(self.create_menu_items(config.menu_items))
            menu_items.append(menu_item)
        return menu_items

    @property
    def action_request(self):
        return self._action_request

    @property
    def menu_items(self):
        return self._menu_items

    def get_menu_items(self):
        return self._menu_items

    def add_menu_item(self, menu_item):
        """Append *menu_item* to the end of this menu; returns self for chaining."""
        self._menu_items.append(menu_item)
        return self

    def set_active_menu_items(self):
        """Recursively activate all menu items matching the action request."""
        for menu_item in self._menu_items:
            menu_item.activate_for_request(self._action_request)
