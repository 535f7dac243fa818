"""Canonical key lists for component and state modules.

Every module of a package gets one constant listing its prop keys. Lists
that contain another module's full list reference it with a spread instead
of repeating its keys:

    const CHECKBOX_STATE_KEYS = ["state", "setState"] as const;
    export const CHECKBOX_KEYS = [...CHECKBOX_STATE_KEYS, "value"] as const;

Key maps are ordered association lists (``[(module_name, keys), ...]``) so
the output order is an explicit input rather than a property of the
container.
"""

import json
import logging
from functools import cmp_to_key

from propkit.extraction import find_literal_node, get_prop_names, is_options_decl, is_state_return_decl
from propkit.naming import const_key_name_of, module_name_of
from propkit.typequery import ParsedFile, Project

from .aggregation import sort_source_files

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "..."
GENERATED_HEADER = "// Automatically generated\n"

KeyMap = list[tuple[str, list[str]]]


def reference_token(module_name: str) -> str:
    """Token standing for all keys of ``module_name`` at its position."""
    return f"{REFERENCE_PREFIX}{const_key_name_of(module_name)}"


def is_reference_token(item: str) -> bool:
    return item.startswith(REFERENCE_PREFIX)


def is_subset_of(a: list[str], b: list[str]) -> bool:
    """Whether every item of ``a`` is in ``b``; empty lists are never subsets."""
    return bool(a) and bool(b) and all(item in b for item in a)


def _compare_state_sets(a: tuple[str, list[str]], b: tuple[str, list[str]]) -> int:
    a_key, a_value = a
    b_key, b_value = b
    if a_key.endswith("State") and b_key.endswith("State"):
        if is_subset_of(a_value, b_value):
            return -1
        if is_subset_of(b_value, a_value):
            return 1
    return 0


def sort_state_sets(entries: KeyMap) -> KeyMap:
    """Stable sort placing ``*State`` subsets before their supersets.

    Entries without a subset relationship keep their relative order. Only
    nested chains are ordered reliably; diamond-shaped relations keep
    whatever order the comparator leaves them in.
    """
    return sorted(entries, key=cmp_to_key(_compare_state_sets))


def _rewrite_pass(entries: KeyMap) -> KeyMap:
    originals = dict(entries)
    placed: KeyMap = []
    for module_name, keys in entries:
        refs = [ref for ref, ref_keys in placed if is_subset_of(ref_keys, keys)]
        rewritten = [reference_token(ref) for ref in refs]
        rewritten += [item for item in keys if not any(item in originals[ref] for ref in refs)]
        placed.append((module_name, rewritten))
    return placed


def replace_subset_in_entries(entries: KeyMap) -> KeyMap:
    """Rewrite key lists to reference earlier subset lists, to a fixpoint.

    Each pass places modules in order; a module's list is replaced by one
    reference token per already-placed module whose list is a subset of it,
    followed by its remaining keys. Passes repeat until nothing changes.

    Expanding the result gives back every key of the original list, but
    referenced keys move to the front: with ``AState = ["b"]``, ``A = ["a", "b"]``
    becomes ``[...A_STATE_KEYS, "a"]``, which expands to ``["b", "a"]``.
    """
    current = [(name, list(keys)) for name, keys in entries]
    passes = 0
    while True:
        rewritten = _rewrite_pass(current)
        passes += 1
        if rewritten == current:
            logger.debug(f"Key references settled after {passes} pass(es)")
            return rewritten
        current = rewritten


def expand_references(entries: KeyMap) -> KeyMap:
    """Replace every reference token with the keys it stands for."""
    by_const = {const_key_name_of(name): keys for name, keys in entries}

    def expand(keys: list[str], seen: frozenset) -> list[str]:
        expanded: list[str] = []
        for item in keys:
            if is_reference_token(item):
                const = item[len(REFERENCE_PREFIX) :]
                if const in seen:
                    raise ValueError(f"Circular key reference: {const}")
                expanded.extend(expand(by_const[const], seen | {const}))
            else:
                expanded.append(item)
        return expanded

    return [(name, expand(keys, frozenset({const_key_name_of(name)}))) for name, keys in entries]


def _render_array(keys: list[str]) -> str:
    if len(keys) == 1 and is_reference_token(keys[0]):
        return keys[0][len(REFERENCE_PREFIX) :]
    items = [item if is_reference_token(item) else json.dumps(item, ensure_ascii=False) for item in keys]
    return f"[{', '.join(items)}] as const"


def render_keys_module(entries: KeyMap) -> str:
    """Render key constants; ``*State`` constants stay module-private."""
    lines = [GENERATED_HEADER]
    for module_name, keys in entries:
        declaration = f"const {const_key_name_of(module_name)} = {_render_array(keys)};\n"
        if not module_name.endswith("State"):
            declaration = f"export {declaration}"
        lines.append(declaration)
    return "".join(lines)


def _append_unique(target: list[str], items: list[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


def collect_module_keys(project: Project, source_files: list[ParsedFile]) -> KeyMap:
    """Collect the key lists of one module directory.

    State return types contribute their own keys (private ones included) and
    every options type that follows starts with all state keys seen so far.
    """
    entries: dict[str, list[str]] = {}
    state_keys: list[str] = []

    for source_file in sort_source_files(source_files):
        for declaration in source_file.declarations:
            if is_state_return_decl(declaration):
                names = get_prop_names(project, declaration, include_private=True)
                _append_unique(state_keys, names)
                keys: list[str] = []
                _append_unique(keys, names)
                entries[module_name_of(declaration.name)] = keys
            elif is_options_decl(declaration):
                literal = find_literal_node(declaration)
                names = []
                if literal is not None:
                    names = get_prop_names(project, literal, include_private=True, source_path=declaration.source_path)
                keys = list(state_keys)
                _append_unique(keys, names)
                entries[module_name_of(declaration.name)] = keys

    return list(entries.items())


def normalize_keys(entries: KeyMap) -> KeyMap:
    """Sort state sets then replace subsets with references.

    Raises:
        ValueError: If a rewritten list no longer expands to its original keys
    """
    ordered = sort_state_sets(entries)
    rewritten = replace_subset_in_entries(ordered)
    for (name, keys), (_, expanded) in zip(ordered, expand_references(rewritten)):
        if set(expanded) != set(keys):
            raise ValueError(f"Key references of {name} do not cover its keys")
    return rewritten


__all__ = [
    "GENERATED_HEADER",
    "KeyMap",
    "collect_module_keys",
    "expand_references",
    "is_reference_token",
    "is_subset_of",
    "normalize_keys",
    "reference_token",
    "render_keys_module",
    "replace_subset_in_entries",
    "sort_state_sets",
]
