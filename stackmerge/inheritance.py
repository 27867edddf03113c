"""Resolution of base components for component inheritance."""

from __future__ import annotations

import posixpath
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .files import is_directory
from .merge import StackConfigError, merge
from .seqs import unique_strings


@dataclass
class BaseComponentConfig:
    """Sections accumulated from a component's chain of base components."""

    vars: dict = field(default_factory=dict)
    settings: dict = field(default_factory=dict)
    env: dict = field(default_factory=dict)
    command: str = ""
    backend_type: str = ""
    backend_section: dict = field(default_factory=dict)
    remote_state_backend_type: str = ""
    remote_state_backend_section: dict = field(default_factory=dict)
    final_base_component_name: str = ""
    inheritance_chain: list[str] = field(default_factory=list)


def _mapping(section: Mapping, key: str, base_component: str, stack: str) -> Mapping | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, Mapping):
        raise StackConfigError(f"invalid '{base_component}.{key}' section in the stack '{stack}'")
    return value


def _string(section: Mapping, key: str, base_component: str, stack: str) -> str:
    if key not in section:
        return ""
    value = section[key]
    if not isinstance(value, str):
        raise StackConfigError(f"invalid '{base_component}.{key}' section in the stack '{stack}'")
    return value


def process_base_component_config(
    config: BaseComponentConfig,
    all_components: Mapping,
    component: str,
    stack: str,
    base_component: str,
    component_base_path: str,
    check_base_component_exists: bool,
) -> None:
    """Fold ``base_component`` and its own bases into ``config``.

    Raises ``StackConfigError`` on invalid sections or, when checking is on,
    on a base component that is neither configured nor a component directory.
    """
    if component == base_component:
        return

    if base_component not in all_components:
        if check_base_component_exists:
            component_path = posixpath.join(component_base_path, base_component)
            try:
                exists = is_directory(component_path)
            except OSError:
                exists = False
            if not exists:
                raise StackConfigError(
                    f"The component '{component}' inherits from the base component "
                    f"'{base_component}' (using 'component:' attribute), but `{base_component}' "
                    f"is not defined in any of the YAML config files for the stack '{stack}'"
                )
        return

    section = all_components[base_component]
    if not isinstance(section, Mapping):
        raise StackConfigError(
            f"invalid config for the base component '{base_component}' "
            f"of the component '{component}' in the stack '{stack}'"
        )

    if "component" in section:
        parent = section["component"]
        if not isinstance(parent, str):
            raise StackConfigError(
                f"invalid 'component:' section of the component '{base_component}' in the stack '{stack}'"
            )
        process_base_component_config(
            config,
            all_components,
            base_component,
            stack,
            parent,
            component_base_path,
            check_base_component_exists,
        )

    base_vars = _mapping(section, "vars", base_component, stack)
    base_settings = _mapping(section, "settings", base_component, stack)
    base_env = _mapping(section, "env", base_component, stack)
    base_backend_type = _string(section, "backend_type", base_component, stack)
    base_backend = _mapping(section, "backend", base_component, stack)
    base_remote_type = _string(section, "remote_state_backend_type", base_component, stack)
    base_remote = _mapping(section, "remote_state_backend", base_component, stack)
    base_command = _string(section, "command", base_component, stack)

    if not config.final_base_component_name:
        config.final_base_component_name = base_component

    config.vars = merge([config.vars, base_vars])
    config.settings = merge([config.settings, base_settings])
    config.env = merge([config.env, base_env])
    config.command = base_command
    config.backend_type = base_backend_type
    config.backend_section = merge([config.backend_section, base_backend])
    config.remote_state_backend_type = base_remote_type
    config.remote_state_backend_section = merge([config.remote_state_backend_section, base_remote])
    config.inheritance_chain = unique_strings([base_component, *config.inheritance_chain])


def find_components_derived_from_base_components(
    stack: str, all_components: Mapping, base_components: Sequence[str]
) -> list[str]:
    """Return the components whose ``component`` attribute names one of ``base_components``."""
    derived = []
    for component, section in all_components.items():
        if not isinstance(section, Mapping):
            raise StackConfigError(f"invalid '{component}' component section in the file '{stack}'")
        if "component" not in section:
            continue
        base = section["component"]
        if not isinstance(base, str):
            raise StackConfigError(
                f"invalid 'component' attribute in the component '{component}' in the file '{stack}'"
            )
        if base and base in base_components:
            derived.append(component)
    return derived