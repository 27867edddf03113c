import pytest

from stackmerge.inheritance import (
    BaseComponentConfig,
    find_components_derived_from_base_components,
    process_base_component_config,
)
from stackmerge.merge import StackConfigError


def _components():
    return {
        "root": {
            "vars": {"x": 1, "y": 1},
            "backend_type": "s3",
            "backend": {"s3": {"bucket": "b"}},
            "command": "tofu",
        },
        "middle": {"component": "root", "vars": {"y": 2}, "settings": {"s": True}},
        "leaf": {"component": "middle"},
    }


def test_single_base_component():
    config = BaseComponentConfig()
    process_base_component_config(config, _components(), "middle", "dev", "root", "", True)
    assert config.vars == {"x": 1, "y": 1}
    assert config.final_base_component_name == "root"
    assert config.inheritance_chain == ["root"]
    assert config.command == "tofu"
    assert config.backend_type == "s3"
    assert config.backend_section == {"s3": {"bucket": "b"}}


def test_chain_of_base_components():
    config = BaseComponentConfig()
    process_base_component_config(config, _components(), "leaf", "dev", "middle", "", True)
    assert config.vars == {"x": 1, "y": 2}
    assert config.settings == {"s": True}
    assert config.inheritance_chain == ["middle", "root"]
    assert config.final_base_component_name == "root"
    assert config.command == ""


def test_component_inheriting_itself_is_ignored():
    config = BaseComponentConfig()
    process_base_component_config(config, _components(), "root", "dev", "root", "", True)
    assert config == BaseComponentConfig()


def test_missing_base_component_raises():
    config = BaseComponentConfig()
    with pytest.raises(StackConfigError, match="is not defined in any of the YAML config files"):
        process_base_component_config(config, {}, "leaf", "dev", "absent", "/nonexistent", True)


def test_missing_base_component_with_directory_is_accepted(tmp_path):
    (tmp_path / "absent").mkdir()
    config = BaseComponentConfig()
    process_base_component_config(config, {}, "leaf", "dev", "absent", str(tmp_path), True)
    assert config == BaseComponentConfig()


def test_missing_base_component_without_check():
    config = BaseComponentConfig()
    process_base_component_config(config, {}, "leaf", "dev", "absent", "/nonexistent", False)
    assert config.inheritance_chain == []


def test_invalid_base_section_raises():
    config = BaseComponentConfig()
    with pytest.raises(StackConfigError, match="invalid config for the base component"):
        process_base_component_config(config, {"root": "oops"}, "leaf", "dev", "root", "", True)


def test_invalid_vars_raises():
    config = BaseComponentConfig()
    with pytest.raises(StackConfigError, match="root.vars"):
        process_base_component_config(
            config, {"root": {"vars": ["a"]}}, "leaf", "dev", "root", "", True
        )


def test_find_derived_components():
    components = {
        "a": {"component": "base"},
        "b": {"component": "other"},
        "c": {"vars": {}},
        "d": {"component": ""},
    }
    assert find_components_derived_from_base_components("dev", components, ["base"]) == ["a"]


def test_find_derived_components_invalid_section():
    with pytest.raises(StackConfigError):
        find_components_derived_from_base_components("dev", {"a": []}, ["base"])


def test_find_derived_components_invalid_attribute():
    with pytest.raises(StackConfigError):
        find_components_derived_from_base_components("dev", {"a": {"component": 3}}, ["base"])