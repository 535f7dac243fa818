"""Naming conventions for declarations and generated constants.

Type names follow a fixed convention:

    ButtonOptions            -> Button
    CheckboxInitialState     -> useCheckboxState
    CheckboxStateReturn      -> CheckboxState
    unstable_ComboboxOptions -> Combobox

Generated key constants use upper snake case with a ``_KEYS`` suffix
(``useCheckboxState`` -> ``USE_CHECKBOX_STATE_KEYS``).
"""

import re

EXPERIMENTAL_PREFIX = "unstable_"
KEYS_SUFFIX = "_KEYS"

_INITIAL_STATE_RE = re.compile(r"^(.+)InitialState$")
_STATE_RETURN_RE = re.compile(r"^(.+)StateReturn$")
_OPTIONS_RE = re.compile(r"^(.+)Options$")

# Upper-case runs, capitalized words, lower-case words and digit runs
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def is_experimental(name: str) -> bool:
    """Whether a declaration or property name carries the experimental marker."""
    return name.startswith(EXPERIMENTAL_PREFIX)


def module_name_of(decl_name: str) -> str:
    """Map a declaration name to the module it documents.

    Names that match none of the recognized suffixes are returned unchanged.
    """
    name = decl_name
    if is_experimental(name):
        name = name[len(EXPERIMENTAL_PREFIX) :]

    match = _INITIAL_STATE_RE.match(name)
    if match:
        base = match.group(1)
        return f"use{base[0].upper()}{base[1:]}State"

    match = _STATE_RETURN_RE.match(name)
    if match:
        return f"{match.group(1)}State"

    match = _OPTIONS_RE.match(name)
    if match:
        return match.group(1)

    return name


def snake_case(text: str) -> str:
    """Split camel/pascal case text into lower-case words joined by ``_``."""
    return "_".join(word.lower() for word in _WORD_RE.findall(text))


def const_key_name_of(module_name: str) -> str:
    """Return the key-list constant name for a module."""
    return f"{snake_case(module_name).upper()}{KEYS_SUFFIX}"


__all__ = [
    "EXPERIMENTAL_PREFIX",
    "KEYS_SUFFIX",
    "const_key_name_of",
    "is_experimental",
    "module_name_of",
    "snake_case",
]
