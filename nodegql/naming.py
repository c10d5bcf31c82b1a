"""Naming helpers for generated query, file and method names."""

from __future__ import annotations

_VOWEL_Y_ENDINGS = ("ay", "ey", "iy", "oy", "uy", "yy")
_SIBILANT_ENDINGS = ("s", "sh", "ch", "x", "z")


def pluralize(word: str) -> str:
    """Return the English plural of *word* using simple suffix rules.

    Examples::

        pluralize("Category")  # "Categories"
        pluralize("Address")   # "Addresses"
        pluralize("Day")       # "Days"
        pluralize("Person")    # "Persons"
    """
    if word.endswith(_VOWEL_Y_ENDINGS):
        return word + "s"
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith(_SIBILANT_ENDINGS):
        return word + "es"
    return word + "s"


def decapitalize(word: str) -> str:
    """Lower-case the first character of *word*."""
    if not word:
        return word
    return word[0].lower() + word[1:]


def is_getter_name(method_name: str) -> bool:
    """Whether *method_name* looks like ``getX`` or ``isX``."""
    return (method_name.startswith("get") and len(method_name) > 3) or (
        method_name.startswith("is") and len(method_name) > 2
    )


def attribute_name_from_getter(method_name: str) -> str:
    """Strip ``get``/``is`` from a getter name and decapitalize the rest."""
    if method_name.startswith("get"):
        return decapitalize(method_name[3:])
    if method_name.startswith("is"):
        return decapitalize(method_name[2:])
    return decapitalize(method_name)
