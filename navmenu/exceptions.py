"""Exceptions raised by the navmenu app."""


class NavmenuError(Exception):
    """Base class for all navmenu errors."""


class UnknownObjectError(NavmenuError):
    """An object in the target arguments has no identity (e.g. unsaved model)."""

    def __init__(self, obj):
        self.obj = obj
        super().__init__(
            f"Cannot determine the identity of {obj!r} ({type(obj).__name__}); "
            "it has not been persisted yet."
        )


class MenuConfigurationError(NavmenuError):
    """A menu was requested that is not configured."""
