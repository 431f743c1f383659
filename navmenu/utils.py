"""Helpers for comparing nested argument structures."""


def _sort_key(key):
    return (type(key).__name__, str(key))


def sort_keys_recursively(value):
    """
    Return a copy of *value* whose dict keys are sorted at every level.

    Lists and tuples are walked so dicts nested inside them are sorted too,
    but their own element order is left alone. Keys are ordered by type
    name, then string form, so ``1`` and ``"1"`` never tie. The input is
    never mutated.
    """
    if isinstance(value, dict):
        return {
            key: sort_keys_recursively(value[key])
            for key in sorted(value, key=_sort_key)
        }
    if isinstance(value, list):
        return [sort_keys_recursively(item) for item in value]
    if isinstance(value, tuple):
        return tuple(sort_keys_recursively(item) for item in value)
    return value
