import pytest

from stackmerge.helmfile import process_helmfile_components
from stackmerge.merge import StackConfigError
from stackmerge.terraform import SectionDefaults


def _run(components, defaults=None, deps=False, imports=None, check=True):
    return process_helmfile_components(
        "stack",
        "stack.yaml",
        components,
        defaults or SectionDefaults(),
        "",
        deps,
        imports,
        check,
    )


def test_default_command_and_global_vars():
    defaults = SectionDefaults(vars={"a": 1}, env={"E": "x"})
    result = _run({"echo": {"vars": {"b": 2}}}, defaults)
    comp = result["echo"]
    assert comp["command"] == "helmfile"
    assert comp["vars"] == {"a": 1, "b": 2}
    assert comp["env"] == {"E": "x"}
    assert comp["deps"] == []
    assert comp["inheritance"] == []
    assert comp["metadata"] == {}
    assert "component" not in comp


def test_defaults_are_not_modified():
    defaults = SectionDefaults(vars={"nested": {"a": 1}})
    _run({"echo": {"vars": {"nested": {"b": 2}}}}, defaults)
    assert defaults.vars == {"nested": {"a": 1}}


def test_inheritance_through_component_attribute():
    components = {
        "infra/infra-server": {"vars": {"a": "1"}, "command": "helmfile-custom"},
        "infra/infra-server-override": {
            "component": "infra/infra-server",
            "vars": {"a": "1_override"},
        },
    }
    comp = _run(components)["infra/infra-server-override"]
    assert comp["vars"]["a"] == "1_override"
    assert comp["command"] == "helmfile-custom"
    assert comp["inheritance"] == ["infra/infra-server"]
    assert comp["component"] == "infra/infra-server"


def test_component_command_overrides_base_command():
    components = {
        "base": {"command": "from-base"},
        "child": {"component": "base", "command": "from-child"},
    }
    assert _run(components)["child"]["command"] == "from-child"


def test_multi_level_chain():
    components = {
        "a": {"vars": {"level": "a", "only_a": True}},
        "b": {"component": "a", "vars": {"level": "b"}},
        "c": {"component": "b"},
    }
    comp = _run(components)["c"]
    assert comp["inheritance"] == ["b", "a"]
    assert comp["component"] == "a"
    assert comp["vars"] == {"level": "b", "only_a": True}


def test_metadata_inherits_order():
    components = {
        "x": {"vars": {"k": "x", "only_x": 1}},
        "y": {"vars": {"k": "y"}},
        "z": {"metadata": {"inherits": ["x", "y"]}},
    }
    comp = _run(components)["z"]
    assert comp["vars"] == {"k": "y", "only_x": 1}
    assert comp["inheritance"] == ["y", "x"]
    assert comp["component"] == "x"


def test_metadata_component_sets_name():
    comp = _run({"echo": {"metadata": {"component": "impl"}}})["echo"]
    assert comp["component"] == "impl"
    assert comp["inheritance"] == []


def test_missing_inherited_component_raises():
    with pytest.raises(StackConfigError, match="inherits from 'missing'"):
        _run({"echo": {"metadata": {"inherits": ["missing"]}}})


def test_missing_inherited_component_ignored_without_check():
    defaults = SectionDefaults(vars={"a": 1})
    comp = _run({"echo": {"metadata": {"inherits": ["missing"]}}}, defaults, check=False)["echo"]
    assert comp["vars"] == {"a": 1}
    assert comp["inheritance"] == []


def test_invalid_vars_section():
    with pytest.raises(
        StackConfigError, match="invalid 'components.helmfile.echo.vars' section in the file 'stack'"
    ):
        _run({"echo": {"vars": "bad"}})


def test_invalid_command_attribute():
    with pytest.raises(StackConfigError, match="components.helmfile.echo.command"):
        _run({"echo": {"command": 5}})


def test_non_mapping_components_section():
    with pytest.raises(StackConfigError, match="invalid 'components.helmfile' section"):
        _run(["echo"])


def test_non_mapping_component_section():
    with pytest.raises(StackConfigError, match="invalid 'components.helmfile.echo' section"):
        _run({"echo": "bad"})


def test_dependencies():
    imports = {
        "catalog/echo": {"components": {"helmfile": {"echo": {"vars": {"a": 1}}}}},
        "catalog/other": {"components": {"terraform": {"vpc": {"vars": {"a": 1}}}}},
    }
    comp = _run({"echo": {}}, deps=True, imports=imports)["echo"]
    assert comp["deps"] == ["catalog/echo", "stack"]