"""
Identity normalization for menu target arguments.

Menu items may be configured with model instances as target arguments
(``MenuItem("Edit", "shop", "products", "edit", {"pk": product})``) while the
incoming request only carries the primary key. Before comparing, instances
are replaced by their identity so both sides use the same primitive values.
"""

import logging

from django.conf import settings
from django.db.models import Model
from django.utils.module_loading import import_string

from .exceptions import UnknownObjectError

logger = logging.getLogger(__name__)


def _convert(value):
    if isinstance(value, Model):
        if value.pk is None:
            raise UnknownObjectError(value)
        return value.pk
    if isinstance(value, dict):
        return {key: _convert(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(item) for item in value]
    return value


def convert_objects_to_identity_arrays(arguments):
    """
    Return a copy of *arguments* with every model instance replaced by its pk.

    Nested dicts, lists and tuples are walked (tuples come back as lists).
    Primitive values pass through unchanged. Raises ``UnknownObjectError`` for
    instances that have not been saved.
    """
    return {key: _convert(value) for key, value in (arguments or {}).items()}


def get_identity_normalizer():
    """Return the normalizer configured by ``NAVMENU_IDENTITY_NORMALIZER``."""
    dotted_path = getattr(settings, "NAVMENU_IDENTITY_NORMALIZER", None)
    if not dotted_path:
        return convert_objects_to_identity_arrays
    logger.debug("Using identity normalizer %s", dotted_path)
    return import_string(dotted_path)
