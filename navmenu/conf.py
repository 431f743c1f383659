"""
Menu configuration loading.

Menus are declared by name, either directly in Django settings::

    NAVMENU_MENUS = {
        "main": {
            "menuItems": [
                {"label": "Assets", "package": "inventory", "controller": "assets", "action": "list"},
            ],
        },
    }

or in a TOML file (``NAVMENU_CONFIG_FILE``, ``menus.toml`` in the project root
by default)::

    [[menus.main.menuItems]]
    label = "Assets"
    package = "inventory"
    controller = "assets"
    action = "list"

Entries from the file override settings entries with the same name.
"""

import logging
import tomllib
from pathlib import Path

from django.conf import settings as django_settings

from .exceptions import MenuConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ACTION_SEPARATOR = "_"

# ---------------------------------------------------------------------------
# Config file loading & caching
# ---------------------------------------------------------------------------
_config_cache: dict | None = None
_config_mtime: float = 0.0
_config_cache_path: Path | None = None


def _config_path() -> Path | None:
    configured = getattr(django_settings, "NAVMENU_CONFIG_FILE", None)
    if configured:
        return Path(configured)
    base_dir = getattr(django_settings, "BASE_DIR", None)
    if base_dir is None:
        return None
    return Path(base_dir) / "menus.toml"


def load_config(*, force_reload: bool = False) -> dict:
    """Load and cache the menu TOML file.

    The file path and mtime are checked on every call so edits (or a changed
    ``NAVMENU_CONFIG_FILE``) take effect without restarting the server.
    Pass *force_reload=True* to bypass the cache unconditionally (useful in
    tests).
    """
    global _config_cache, _config_mtime, _config_cache_path

    path = _config_path()

    if path is None or not path.exists():
        logger.debug("Menu config file not found at %s; using settings only.", path)
        _config_cache = {}
        _config_mtime = 0.0
        _config_cache_path = None
        return _config_cache

    try:
        current_mtime = path.stat().st_mtime
    except OSError:
        current_mtime = 0.0

    if (
        _config_cache is not None
        and not force_reload
        and path == _config_cache_path
        and current_mtime == _config_mtime
    ):
        return _config_cache

    try:
        with open(path, "rb") as fh:
            _config_cache = tomllib.load(fh)
        _config_mtime = current_mtime
        _config_cache_path = path
        logger.info("Loaded menu config from %s", path)
    except Exception:
        logger.exception("Failed to parse %s; ignoring menu config file.", path)
        _config_cache = {}
        _config_mtime = 0.0
        _config_cache_path = None

    return _config_cache


def clear_config_cache() -> None:
    """Reset the cached config.  Mainly useful in tests."""
    global _config_cache, _config_mtime, _config_cache_path
    _config_cache = None
    _config_mtime = 0.0
    _config_cache_path = None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_menu_configurations() -> dict:
    """Return all configured menus as ``{name: {"menuItems": [...]}}``."""
    menus = dict(getattr(django_settings, "NAVMENU_MENUS", None) or {})
    file_menus = load_config().get("menus", {})
    if isinstance(file_menus, dict):
        menus.update(file_menus)
    else:
        logger.warning("Ignoring 'menus' in menu config file: expected a table.")
    return menus


def get_menu_configuration(name: str) -> dict:
    """Return the configuration of the menu called *name*.

    Raises ``MenuConfigurationError`` if no such menu is configured.
    """
    menus = get_menu_configurations()
    try:
        return menus[name]
    except KeyError:
        raise MenuConfigurationError(
            f"No menu named '{name}' is configured (known: {', '.join(sorted(menus)) or 'none'})."
        ) from None


def get_action_separator() -> str:
    """Separator between controller and action in URL names (``assets_list``)."""
    return getattr(django_settings, "NAVMENU_ACTION_SEPARATOR", None) or DEFAULT_ACTION_SEPARATOR
