"""Reading stack files and resolving their imports."""

from __future__ import annotations

import posixpath
import threading
from collections.abc import Mapping

import yaml

from .dependencies import parse_imports
from .files import trim_base_path_from_path
from .globbing import get_glob_matches
from .merge import StackConfigError, merge
from .templates import process_template

DEFAULT_STACK_CONFIG_FILE_EXTENSION = ".yaml"

_content_cache: dict[str, str] = {}
_content_lock = threading.Lock()


def read_file_content(file_path: str) -> str:
    """Return the file's text, read once and cached per path."""
    with _content_lock:
        cached = _content_cache.get(file_path)
    if cached is not None:
        return cached
    with open(file_path, encoding="utf-8") as handle:
        content = handle.read()
    with _content_lock:
        _content_cache[file_path] = content
    return content


def _ext(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _parse_yaml(text: str, relative_path: str) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise StackConfigError(f"invalid YAML file '{relative_path}'\n{err}") from err
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise StackConfigError(
            f"invalid YAML file '{relative_path}'\nthe document is not a mapping"
        )
    return dict(data)


def _matches(pattern: str, imp: str, relative_path: str) -> list[str]:
    try:
        return get_glob_matches(pattern)
    except (OSError, ValueError):
        pass
    # Lookups can fail transiently on busy filesystems; try once more.
    try:
        return get_glob_matches(pattern)
    except (OSError, ValueError) as err:
        raise StackConfigError(
            f"no matches found for the import '{imp}' in the file '{relative_path}'\nError: {err}"
        ) from err


def process_yaml_config_file(
    base_path: str,
    file_path: str,
    imports_config: dict,
    context: Mapping | None,
    ignore_missing_files: bool,
) -> tuple[dict, dict, dict]:
    """Load a stack file, resolve its imports recursively and deep-merge them.

    Returns the merged config, ``imports_config`` (filled with the raw config of
    every import, keyed by path without extension) and the file's own config.
    """
    relative_path = trim_base_path_from_path(base_path + "/", file_path)

    try:
        text = read_file_content(file_path)
    except OSError:
        if not ignore_missing_files:
            raise
        text = ""

    if context:
        text = process_template(relative_path, text, context)

    stack_config = _parse_yaml(text, relative_path)
    configs: list[Mapping] = []

    for stack_import in parse_imports(stack_config, relative_path):
        imp = stack_import.path
        if not imp:
            raise StackConfigError(f"invalid empty import in the file '{relative_path}'")

        imp_with_ext = imp if _ext(imp) else imp + DEFAULT_STACK_CONFIG_FILE_EXTENSION
        imp_path = posixpath.normpath(posixpath.join(base_path, imp_with_ext))

        if imp_path == file_path:
            raise StackConfigError(
                f"invalid import in the file '{relative_path}'\nThe file imports itself in '{imp}'"
            )

        matches = _matches(imp_path, imp, relative_path)

        merged_context = merge([context or {}, stack_import.context])
        child_context = {str(key): value for key, value in merged_context.items()}

        for import_file in matches:
            import_config, _, import_raw = process_yaml_config_file(
                base_path, import_file, imports_config, child_context, ignore_missing_files
            )
            configs.append(import_config)
            relative_with_ext = import_file.replace(base_path + "/", "", 1)
            ext = _ext(relative_with_ext) or DEFAULT_STACK_CONFIG_FILE_EXTENSION
            key = relative_with_ext[: -len(ext)] if relative_with_ext.endswith(ext) else relative_with_ext
            imports_config[key] = import_raw

    if stack_config:
        configs.append(stack_config)

    return merge(configs), imports_config, stack_config