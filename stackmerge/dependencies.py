"""Import sections and the dependencies of components on imported files."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .merge import StackConfigError
from .seqs import unique_strings

_IMPORT_SECTION = "import"

_SECTIONS_TO_CHECK = (
    "backend",
    "backend_type",
    "env",
    "remote_state_backend",
    "remote_state_backend_type",
    "settings",
    "vars",
)


@dataclass
class StackImport:
    """One entry of a stack file's ``import`` section."""

    path: str
    context: dict = field(default_factory=dict)


def _decode_structured(imports: list) -> list[StackImport] | None:
    decoded = []
    for item in imports:
        if not isinstance(item, Mapping):
            return None
        path = item.get("path", "")
        if path is None:
            path = ""
        if not isinstance(path, str):
            return None
        context = item.get("context")
        if context is None:
            context = {}
        if not isinstance(context, Mapping):
            return None
        decoded.append(StackImport(path, {str(k): v for k, v in context.items()}))
    return decoded


def parse_imports(stack_map: Mapping, file_path: str) -> list[StackImport]:
    """Read the ``import`` section, a list of strings or of ``path``/``context`` mappings.

    Raises ``StackConfigError`` on a null or malformed entry.
    """
    imports = stack_map.get(_IMPORT_SECTION)
    if not isinstance(imports, list) or not imports:
        return []

    structured = _decode_structured(imports)
    if structured:
        return structured

    result = []
    for item in imports:
        if isinstance(item, str):
            result.append(StackImport(item))
        elif item is None:
            raise StackConfigError(f"invalid empty import in the file '{file_path}'")
        else:
            raise StackConfigError(f"invalid import '{item}' in the file '{file_path}'")
    return result


def section_contains_any_not_empty_sections(
    section: Mapping, sections_to_check: Sequence[str]
) -> bool:
    """True if any named key holds a non-empty mapping or a non-empty string."""
    for name in sections_to_check:
        if not name or name not in section:
            continue
        value = section[name]
        if isinstance(value, (Mapping, str)) and len(value) > 0:
            return True
    return False


def find_component_stacks(
    component_type: str,
    component: str,
    base_component: str,
    component_stack_map: Mapping[str, Mapping[str, Sequence[str]]],
) -> list[str]:
    """Return the sorted stacks in which the component or its base component is defined."""
    stacks: list[str] = []
    by_component = component_stack_map.get(component_type)
    if by_component is not None:
        stacks.extend(by_component.get(component, []))
        if base_component:
            stacks.extend(by_component.get(base_component, []))
    return sorted(unique_strings(stacks))


def _component_type_section(stack_import: Mapping, component_type: str) -> Mapping | None:
    components = stack_import.get("components")
    if not isinstance(components, Mapping):
        return None
    section = components.get(component_type)
    return section if isinstance(section, Mapping) else None


def _base_component_defined_here(
    stack: str,
    stack_import: Mapping,
    base_section: Mapping,
    component_type: str,
    base_component: str,
    stack_imports: Mapping[str, Mapping],
) -> bool:
    nested_imports = parse_imports(stack_import, stack)
    if not nested_imports:
        return True
    for nested in nested_imports:
        nested_map = stack_imports.get(nested.path)
        if not isinstance(nested_map, Mapping):
            continue
        type_section = _component_type_section(nested_map, component_type)
        if type_section is None:
            continue
        nested_base = type_section.get(base_component)
        if not isinstance(nested_base, Mapping):
            continue
        if base_section != nested_base:
            return True
    return False


def _import_is_dependency(
    stack: str,
    component_type: str,
    component: str,
    base_components: Sequence[str],
    stack_import: Mapping,
    stack_imports: Mapping[str, Mapping],
) -> bool:
    if section_contains_any_not_empty_sections(stack_import, _SECTIONS_TO_CHECK):
        return True

    if section_contains_any_not_empty_sections(stack_import, [component_type]):
        type_globals = stack_import[component_type]
        if isinstance(type_globals, Mapping) and section_contains_any_not_empty_sections(
            type_globals, _SECTIONS_TO_CHECK
        ):
            return True

    type_section = _component_type_section(stack_import, component_type)
    if type_section is None:
        return False

    component_section = type_section.get(component)
    if isinstance(component_section, Mapping) and component_section:
        return True

    for base_component in base_components:
        base_section = type_section.get(base_component)
        if not isinstance(base_section, Mapping) or not base_section:
            continue
        if _base_component_defined_here(
            stack, stack_import, base_section, component_type, base_component, stack_imports
        ):
            return True
    return False


def find_component_dependencies(
    stack: str,
    component_type: str,
    component: str,
    base_components: Sequence[str],
    stack_imports: Mapping[str, Mapping],
) -> list[str]:
    """Return the sorted imported files (and the stack itself) the component depends on.

    An import counts when it has non-empty global or component-type sections,
    defines the component, or defines a base component inline.
    """
    deps = [
        name
        for name, stack_import in stack_imports.items()
        if _import_is_dependency(
            stack, component_type, component, base_components, stack_import, stack_imports
        )
    ]
    deps.append(stack)
    return sorted(unique_strings(deps))