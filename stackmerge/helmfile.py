"""Final configuration of the Helmfile components of a stack."""

from __future__ import annotations

from collections.abc import Mapping

from .dependencies import find_component_dependencies
from .inheritance import BaseComponentConfig, process_base_component_config
from .merge import StackConfigError, merge
from .terraform import SectionDefaults

_COMPONENT_TYPE = "helmfile"
_DEFAULT_COMMAND = "helmfile"


def _section(component_map: Mapping, key: str, component: str, stack_name: str) -> Mapping:
    if key not in component_map:
        return {}
    value = component_map[key]
    if not isinstance(value, Mapping):
        raise StackConfigError(
            f"invalid 'components.helmfile.{component}.{key}' section in the file '{stack_name}'"
        )
    return value


def _attribute(component_map: Mapping, key: str, component: str, stack_name: str) -> str:
    if key not in component_map:
        return ""
    value = component_map[key]
    if not isinstance(value, str):
        raise StackConfigError(
            f"invalid 'components.helmfile.{component}.{key}' attribute in the file '{stack_name}'"
        )
    return value


def _process_component(
    stack_name: str,
    stack: str,
    component: str,
    component_map: Mapping,
    components: Mapping,
    defaults: SectionDefaults,
    components_base_path: str,
    process_component_deps: bool,
    imports_config: Mapping,
    check_base_component_exists: bool,
) -> dict:
    component_vars = _section(component_map, "vars", component, stack_name)
    component_settings = _section(component_map, "settings", component, stack_name)
    component_env = _section(component_map, "env", component, stack_name)
    # Metadata belongs to the component alone: never merged nor inherited.
    component_metadata = _section(component_map, "metadata", component, stack_name)
    component_command = _attribute(component_map, "command", component, stack_name)

    base = BaseComponentConfig()
    base_component_name = ""

    if "component" in component_map:
        base_component_name = component_map["component"]
        if not isinstance(base_component_name, str):
            raise StackConfigError(
                f"invalid 'components.helmfile.{component}.component' attribute "
                f"in the file '{stack_name}'"
            )
        process_base_component_config(
            base, components, component, stack, base_component_name,
            components_base_path, check_base_component_exists,
        )
        base_component_name = base.final_base_component_name

    if "component" in component_metadata:
        base_component_name = component_metadata["component"]
        if not isinstance(base_component_name, str):
            raise StackConfigError(
                f"invalid 'components.helmfile.{component}.metadata.component' attribute "
                f"in the file '{stack_name}'"
            )

    base_components = [base_component_name]

    inherits = component_metadata.get("inherits")
    if isinstance(inherits, list):
        for inherited in inherits:
            if not isinstance(inherited, str):
                raise StackConfigError(
                    f"invalid 'components.helmfile.{component}.metadata.inherits' section "
                    f"in the file '{stack_name}'"
                )
            if inherited not in components and check_base_component_exists:
                raise StackConfigError(
                    f"The component '{component}' in the stack '{stack_name}' inherits from "
                    f"'{inherited}' (using 'metadata.inherits'), but '{inherited}' is not defined "
                    f"in any of the YAML config files for the stack '{stack_name}'"
                )
            base_components.append(inherited)
            process_base_component_config(
                base, components, component, stack, inherited,
                components_base_path, check_base_component_exists,
            )
            base_component_name = base.final_base_component_name

    final_vars = merge([defaults.vars, base.vars, component_vars])
    final_settings = merge([defaults.settings, base.settings, component_settings])
    final_env = merge([defaults.env, base.env, component_env])

    command = _DEFAULT_COMMAND
    if base.command:
        command = base.command
    if component_command:
        command = component_command

    result = {
        "vars": final_vars,
        "settings": final_settings,
        "env": final_env,
        "command": command,
        "inheritance": list(base.inheritance_chain),
        "metadata": component_metadata,
    }
    if base_component_name:
        result["component"] = base_component_name

    if process_component_deps:
        result["deps"] = find_component_dependencies(
            stack_name, _COMPONENT_TYPE, component, base_components, imports_config
        )
    else:
        result["deps"] = []
    return result


def process_helmfile_components(
    stack_name: str,
    stack: str,
    components: Mapping,
    defaults: SectionDefaults,
    components_base_path: str,
    process_component_deps: bool,
    imports_config: Mapping | None,
    check_base_component_exists: bool,
) -> dict:
    """Return the final configuration of every component in ``components.helmfile``.

    Raises ``StackConfigError`` on invalid sections or unknown base components.
    """
    if not isinstance(components, Mapping):
        raise StackConfigError(f"invalid 'components.helmfile' section in the file '{stack_name}'")

    result = {}
    for component, component_map in components.items():
        if not isinstance(component, str):
            raise StackConfigError(
                f"invalid 'components.helmfile' section in the file '{stack_name}'"
            )
        if not isinstance(component_map, Mapping):
            raise StackConfigError(
                f"invalid 'components.helmfile.{component}' section in the file '{stack_name}'"
            )
        result[component] = _process_component(
            stack_name,
            stack,
            component,
            component_map,
            components,
            defaults,
            components_base_path,
            process_component_deps,
            imports_config or {},
            check_base_component_exists,
        )
    return result