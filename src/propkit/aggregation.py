"""Per-module aggregation of documented props.

Walks the source files of one module (state files first) and builds the
ordered ``ModulePropMap`` rendered into the module README: each component's
own props, plus the props it inherits from the module's state hook.
"""

import logging
from dataclasses import dataclass, field

from propkit.extraction import (
    PropertyDescriptor,
    create_prop_descriptors,
    is_initial_state_decl,
    is_props_decl,
    is_state_return_decl,
)
from propkit.naming import module_name_of
from propkit.typequery import ParsedFile, Project

logger = logging.getLogger(__name__)


@dataclass
class ModuleProps:
    """Documented props of one module.

    Attributes:
        props: Props declared by the module itself
        state_props: Props inherited from a composed state hook
    """

    props: list[PropertyDescriptor] = field(default_factory=list)
    state_props: list[PropertyDescriptor] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.props and not self.state_props


# Insertion-ordered: module name -> props
ModulePropMap = dict[str, ModuleProps]


class StateTypes:
    """Property names returned by the state hooks seen so far in one module."""

    def __init__(self):
        self._names: list[str] = []

    def add(self, names: list[str]) -> None:
        for name in names:
            if name not in self._names:
                self._names.append(name)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    @property
    def names(self) -> list[str]:
        return list(self._names)


def sort_source_files(source_files: list[ParsedFile]) -> list[ParsedFile]:
    """Order files so state files come first, then by base name."""
    return sorted(
        source_files,
        key=lambda f: ("State" not in f.base_name_without_extension, f.base_name_without_extension),
    )


class ModuleAggregator:
    """Builds the ``ModulePropMap`` for the source files of one module.

    The aggregator owns the module's ``StateTypes``; a new aggregator is
    created per module so state never leaks between modules.

    Example:
        >>> aggregator = ModuleAggregator(project)
        >>> prop_map = aggregator.collect(source_files)
        >>> list(prop_map)
        ['useCheckboxState', 'CheckboxState', 'Checkbox']
    """

    def __init__(self, project: Project):
        self.project = project
        self.state_types = StateTypes()
        self.prop_map: ModulePropMap = {}

    def collect(self, source_files: list[ParsedFile]) -> ModulePropMap:
        for source_file in sort_source_files(source_files):
            for declaration in source_file.declarations:
                if is_state_return_decl(declaration):
                    props = create_prop_descriptors(self.project, declaration)
                    self.state_types.add([prop.name for prop in props])
                    self._record(module_name_of(declaration.name), props, [])
                elif is_props_decl(declaration):
                    props = create_prop_descriptors(self.project, declaration)
                    module_name = module_name_of(declaration.name)
                    if is_initial_state_decl(declaration):
                        self._record(module_name, props, [])
                    else:
                        own = [prop for prop in props if prop.name not in self.state_types]
                        inherited = [prop for prop in props if prop.name in self.state_types]
                        self._record(module_name, own, inherited)
        return self.prop_map

    def _record(
        self,
        module_name: str,
        props: list[PropertyDescriptor],
        state_props: list[PropertyDescriptor],
    ) -> None:
        existing = self.prop_map.get(module_name)
        if existing is None:
            self.prop_map[module_name] = ModuleProps(props=list(props), state_props=list(state_props))
            return
        # Direct props are set once; later declarations only add state props
        logger.debug(f"Merging additional state props into {module_name}")
        known = {prop.name for prop in existing.state_props}
        existing.state_props.extend(prop for prop in state_props if prop.name not in known)


def collect_module_props(project: Project, source_files: list[ParsedFile]) -> ModulePropMap:
    """Aggregate the documented props of one module's source files."""
    return ModuleAggregator(project).collect(source_files)


__all__ = [
    "ModuleAggregator",
    "ModulePropMap",
    "ModuleProps",
    "StateTypes",
    "collect_module_props",
    "sort_source_files",
]
