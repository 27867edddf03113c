"""Final configuration of the Terraform components of a stack."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .dependencies import find_component_dependencies
from .inheritance import BaseComponentConfig, process_base_component_config
from .merge import StackConfigError, merge
from .seqs import unique_strings

_COMPONENT_TYPE = "terraform"
_DEFAULT_COMMAND = "terraform"


@dataclass
class SectionDefaults:
    """Stack-wide sections that every component of one type starts from.

    ``vars``, ``settings`` and ``env`` are the global sections already merged
    with the component-type sections; the backend fields come from the
    component-type section alone.
    """

    vars: dict = field(default_factory=dict)
    settings: dict = field(default_factory=dict)
    env: dict = field(default_factory=dict)
    backend_type: str = ""
    backend: dict = field(default_factory=dict)
    remote_state_backend_type: str = ""
    remote_state_backend: dict = field(default_factory=dict)


def _section(component_map: Mapping, key: str, component: str, stack_name: str) -> Mapping:
    if key not in component_map:
        return {}
    value = component_map[key]
    if not isinstance(value, Mapping):
        raise StackConfigError(
            f"invalid 'components.terraform.{component}.{key}' section in the file '{stack_name}'"
        )
    return value


def _attribute(component_map: Mapping, key: str, component: str, stack_name: str) -> str:
    if key not in component_map:
        return ""
    value = component_map[key]
    if not isinstance(value, str):
        raise StackConfigError(
            f"invalid 'components.terraform.{component}.{key}' attribute in the file '{stack_name}'"
        )
    return value


def _last_non_empty(*values: str) -> str:
    result = values[0]
    for value in values[1:]:
        if value:
            result = value
    return result


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
    if "spacelift" in component_settings and not isinstance(component_settings["spacelift"], Mapping):
        raise StackConfigError(
            f"invalid 'components.terraform.{component}.settings.spacelift' section "
            f"in the file '{stack_name}'"
        )
    component_env = _section(component_map, "env", component, stack_name)
    # Metadata belongs to the component alone: never merged nor inherited.
    component_metadata = _section(component_map, "metadata", component, stack_name)
    component_backend_type = _attribute(component_map, "backend_type", component, stack_name)
    component_backend = _section(component_map, "backend", component, stack_name)
    component_remote_type = _attribute(component_map, "remote_state_backend_type", component, stack_name)
    component_remote = _section(component_map, "remote_state_backend", component, stack_name)
    component_command = _attribute(component_map, "command", component, stack_name)

    base = BaseComponentConfig()
    base_component_name = ""

    if "component" in component_map:
        base_component_name = component_map["component"]
        if not isinstance(base_component_name, str):
            raise StackConfigError(
                f"invalid 'components.terraform.{component}.component' attribute "
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
                f"invalid 'components.terraform.{component}.metadata.component' attribute "
                f"in the file '{stack_name}'"
            )

    base_components = [base_component_name]

    inherits = component_metadata.get("inherits")
    if isinstance(inherits, list):
        for inherited in inherits:
            if not isinstance(inherited, str):
                raise StackConfigError(
                    f"invalid 'components.terraform.{component}.metadata.inherits' section "
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

    base_components = sorted(unique_strings(base_components))

    final_vars = merge([defaults.vars, base.vars, component_vars])
    final_settings = merge([defaults.settings, base.settings, component_settings])
    final_env = merge([defaults.env, base.env, component_env])

    backend_type = _last_non_empty(defaults.backend_type, base.backend_type, component_backend_type)
    backend_section = merge([defaults.backend, base.backend_section, component_backend])

    # The backend is taken by reference so that defaults filled in below also
    # reach the remote state backend, which is merged on top of this section.
    backend: dict = {}
    if backend_type in backend_section:
        backend = backend_section[backend_type]
        if not isinstance(backend, dict):
            raise StackConfigError(
                f"invalid 'terraform.backend' section for the component '{component}'"
            )

    if backend_type == "s3" and not isinstance(backend.get("workspace_key_prefix"), str):
        prefix_component = base_component_name or component
        backend["workspace_key_prefix"] = prefix_component.replace("/", "-")

    if backend_type == "azurerm" and not isinstance(component_backend.get("azurerm"), Mapping):
        key_component = base_component_name or component
        base_key_name = ""
        global_azurerm = defaults.backend.get("azurerm")
        if isinstance(global_azurerm, Mapping):
            base_key_name = global_azurerm.get("key", "")
            if not isinstance(base_key_name, str):
                raise StackConfigError(
                    f"invalid 'terraform.backend.azurerm.key' attribute in the file '{stack_name}'"
                )
        backend["key"] = f"{base_key_name}/{key_component.replace('/', '-')}.terraform.tfstate"

    remote_type = _last_non_empty(
        backend_type,
        defaults.remote_state_backend_type,
        base.remote_state_backend_type,
        component_remote_type,
    )
    remote_section = merge(
        [defaults.remote_state_backend, base.remote_state_backend_section, component_remote]
    )
    remote_merged = merge([backend_section, remote_section])

    remote_backend: dict = {}
    if remote_type in remote_merged:
        remote_backend = remote_merged[remote_type]
        if not isinstance(remote_backend, dict):
            raise StackConfigError(
                f"invalid 'terraform.remote_state_backend' section for the component '{component}'"
            )

    command = _last_non_empty(_DEFAULT_COMMAND, base.command, component_command)

    # Abstract components must not pass `workspace_enabled` on to derived ones.
    if component_metadata.get("type") == "abstract" and "spacelift" in final_settings:
        spacelift = final_settings["spacelift"]
        if not isinstance(spacelift, dict):
            raise StackConfigError(
                f"invalid 'components.terraform.{component}.settings.spacelift' section "
                f"in the file '{stack_name}'"
            )
        spacelift.pop("workspace_enabled", None)

    result = {
        "vars": final_vars,
        "settings": final_settings,
        "env": final_env,
        "backend_type": backend_type,
        "backend": backend,
        "remote_state_backend_type": remote_type,
        "remote_state_backend": remote_backend,
        "command": command,
        "inheritance": list(base.inheritance_chain),
        "metadata": component_metadata,
    }
    if base_component_name:
        result["component"] = base_component_name

    if process_component_deps:
        result["deps"] = find_component_dependencies(
            stack_name, _COMPONENT_TYPE, component, base_components, imports_config or {}
        )
    else:
        result["deps"] = []
    return result


def process_terraform_components(
    stack_name: str,
    stack: str,
    components: Mapping,
    defaults: SectionDefaults,
    components_base_path: str,
    process_component_deps: bool,
    imports_config: Mapping | None,
    check_base_component_exists: bool,
) -> dict:
    """Return the final configuration of every component in ``components.terraform``.

    Raises ``StackConfigError`` on invalid sections, unknown base components
    or malformed backends.
    """
    if not isinstance(components, Mapping):
        raise StackConfigError(f"invalid 'components.terraform' section in the file '{stack_name}'")

    result = {}
    for component, component_map in components.items():
        if not isinstance(component, str):
            raise StackConfigError(
                f"invalid 'components.terraform' section in the file '{stack_name}'"
            )
        if not isinstance(component_map, Mapping):
            raise StackConfigError(
                f"invalid 'components.terraform.{component}' section in the file '{stack_name}'"
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