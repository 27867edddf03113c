"""Processing of whole stack files into final component configurations."""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .files import is_yaml, trim_base_path_from_path
from .helmfile import process_helmfile_components
from .loader import DEFAULT_STACK_CONFIG_FILE_EXTENSION, process_yaml_config_file
from .merge import StackConfigError, merge
from .seqs import unique_strings
from .serialize import convert_to_yaml
from .terraform import SectionDefaults, process_terraform_components

_COMPONENT_TYPES = ("terraform", "helmfile")


def _dirname(path: str) -> str:
    directory = posixpath.dirname(path)
    return posixpath.normpath(directory) if directory else "."


def _strip_extensions(name: str) -> str:
    return name.removesuffix(DEFAULT_STACK_CONFIG_FILE_EXTENSION).removesuffix(".yml")


def _mapping(container: Mapping, key: str, label: str, stack_name: str) -> Mapping:
    if key not in container:
        return {}
    value = container[key]
    if not isinstance(value, Mapping):
        raise StackConfigError(f"invalid '{label}' section in the file '{stack_name}'")
    return value


def _string(container: Mapping, key: str, label: str, stack_name: str) -> str:
    if key not in container:
        return ""
    value = container[key]
    if not isinstance(value, str):
        raise StackConfigError(f"invalid '{label}' section in the file '{stack_name}'")
    return value


def process_stack_config(
    stacks_base_path: str,
    terraform_components_base_path: str,
    helmfile_components_base_path: str,
    stack: str,
    config: Mapping,
    process_stack_deps: bool,
    process_component_deps: bool,
    component_type_filter: str | None,
    component_stack_map: Mapping | None,
    imports_config: Mapping | None,
    check_base_component_exists: bool,
) -> dict:
    """Deep-merge globals, base components and components of a merged stack config.

    Returns ``{"components": {"terraform": {...}, "helmfile": {...}}}``.
    ``process_stack_deps`` and ``component_stack_map`` are accepted for
    compatibility and do not change the result.
    """
    stack_name = _strip_extensions(trim_base_path_from_path(stacks_base_path + "/", stack))

    global_vars = _mapping(config, "vars", "vars", stack_name)
    global_settings = _mapping(config, "settings", "settings", stack_name)
    global_env = _mapping(config, "env", "env", stack_name)
    terraform = _mapping(config, "terraform", "terraform", stack_name)
    helmfile = _mapping(config, "helmfile", "helmfile", stack_name)
    components = _mapping(config, "components", "components", stack_name)

    terraform_vars = merge([global_vars, _mapping(terraform, "vars", "terraform.vars", stack_name)])
    terraform_settings = merge(
        [global_settings, _mapping(terraform, "settings", "terraform.settings", stack_name)]
    )
    terraform_env = merge([global_env, _mapping(terraform, "env", "terraform.env", stack_name)])
    terraform_defaults = SectionDefaults(
        vars=terraform_vars,
        settings=terraform_settings,
        env=terraform_env,
        backend_type=_string(terraform, "backend_type", "terraform.backend_type", stack_name),
        backend=dict(_mapping(terraform, "backend", "terraform.backend", stack_name)),
        remote_state_backend_type=_string(
            terraform, "remote_state_backend_type", "terraform.remote_state_backend_type", stack_name
        ),
        remote_state_backend=dict(
            _mapping(terraform, "remote_state_backend", "terraform.remote_state_backend", stack_name)
        ),
    )

    helmfile_defaults = SectionDefaults(
        vars=merge([global_vars, _mapping(helmfile, "vars", "helmfile.vars", stack_name)]),
        settings=merge(
            [global_settings, _mapping(helmfile, "settings", "helmfile.settings", stack_name)]
        ),
        env=merge([global_env, _mapping(helmfile, "env", "helmfile.env", stack_name)]),
    )

    terraform_components: dict = {}
    helmfile_components: dict = {}

    if component_type_filter in (None, "", "terraform") and "terraform" in components:
        terraform_components = process_terraform_components(
            stack_name,
            stack,
            components["terraform"],
            terraform_defaults,
            terraform_components_base_path,
            process_component_deps,
            imports_config,
            check_base_component_exists,
        )

    if component_type_filter in (None, "", "helmfile") and "helmfile" in components:
        helmfile_components = process_helmfile_components(
            stack_name,
            stack,
            components["helmfile"],
            helmfile_defaults,
            helmfile_components_base_path,
            process_component_deps,
            imports_config,
            check_base_component_exists,
        )

    return {"components": {"terraform": terraform_components, "helmfile": helmfile_components}}


@dataclass
class _StackResult:
    name: str
    yaml_text: str
    config: dict
    raw: dict


def _process_file(
    stacks_base_path: str,
    terraform_components_base_path: str,
    helmfile_components_base_path: str,
    file_path: str,
    process_stack_deps: bool,
    process_component_deps: bool,
    ignore_missing_files: bool,
) -> _StackResult:
    stack_base_path = stacks_base_path or _dirname(file_path)
    stack_file_name = _strip_extensions(
        trim_base_path_from_path(stack_base_path + "/", file_path)
    )

    merged, imports_config, stack_config = process_yaml_config_file(
        stack_base_path, file_path, {}, None, ignore_missing_files
    )
    imports = sorted(unique_strings(imports_config))

    final = process_stack_config(
        stack_base_path,
        terraform_components_base_path,
        helmfile_components_base_path,
        file_path,
        merged,
        process_stack_deps,
        process_component_deps,
        "",
        {},
        imports_config,
        True,
    )
    final["imports"] = imports

    return _StackResult(
        stack_file_name,
        convert_to_yaml(final),
        final,
        {"stack": stack_config, "imports": imports_config},
    )


def process_yaml_config_files(
    stacks_base_path: str,
    terraform_components_base_path: str,
    helmfile_components_base_path: str,
    file_paths: Sequence[str],
    process_stack_deps: bool,
    process_component_deps: bool,
    ignore_missing_files: bool,
) -> tuple[list[str], dict, dict]:
    """Process every stack file, resolving and deep-merging its imports.

    Returns the YAML text of each final stack (in input order), the final
    configs keyed by stack name, and the raw stack and import configs.
    """
    with ThreadPoolExecutor() as pool:
        futures = [
            pool.submit(
                _process_file,
                stacks_base_path,
                terraform_components_base_path,
                helmfile_components_base_path,
                path,
                process_stack_deps,
                process_component_deps,
                ignore_missing_files,
            )
            for path in file_paths or []
        ]
        results = [future.result() for future in futures]

    list_result = [r.yaml_text for r in results]
    map_result = {r.name: r.config for r in results}
    raw_configs = {r.name: r.raw for r in results}
    return list_result, map_result, raw_configs


def _yaml_files(directory: str) -> Iterator[str]:
    for entry in sorted(os.listdir(directory)):
        full = posixpath.join(directory, entry)
        if os.path.isdir(full):
            yield from _yaml_files(full)
        elif is_yaml(full):
            yield full


def create_component_stack_map(
    stacks_base_path: str,
    terraform_components_base_path: str,
    helmfile_components_base_path: str,
    file_path: str,
) -> dict[str, dict[str, list[str]]]:
    """Map each component type and component to the stacks that define it.

    Every YAML file in the directory of ``file_path`` (recursively) is processed.
    """
    directory = _dirname(file_path)
    os.stat(directory)

    stack_components: dict[str, dict[str, list[str]]] = {t: {} for t in _COMPONENT_TYPES}
    for path in _yaml_files(directory):
        config, _, _ = process_yaml_config_file(stacks_base_path, path, {}, None, False)
        final = process_stack_config(
            stacks_base_path,
            terraform_components_base_path,
            helmfile_components_base_path,
            path,
            config,
            False,
            False,
            "",
            None,
            None,
            True,
        )
        stack_name = path.replace(stacks_base_path + "/", "", 1)
        for component_type in _COMPONENT_TYPES:
            names = final["components"].get(component_type, {})
            if names:
                stack_components[component_type].setdefault(stack_name, []).extend(names)

    component_stacks: dict[str, dict[str, list[str]]] = {t: {} for t in _COMPONENT_TYPES}
    for component_type, by_stack in stack_components.items():
        for stack, names in by_stack.items():
            stack_without_ext = stack.replace(DEFAULT_STACK_CONFIG_FILE_EXTENSION, "", 1)
            for name in names:
                component_stacks[component_type].setdefault(name, []).append(stack_without_ext)
    return component_stacks