"""Utility helpers shared across Tessera modules."""

from tessera.utils.inflection import identifier, pluralize, remove_suffix, underscore

__all__ = [
    "identifier",
    "pluralize",
    "remove_suffix",
    "underscore",
]
