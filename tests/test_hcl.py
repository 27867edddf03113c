import pytest

from stackmerge.hcl import (
    convert_to_hcl,
    print_as_hcl,
    write_terraform_backend_config_to_file_as_hcl,
    write_to_file_as_hcl,
)


def test_top_level_keys_are_unquoted():
    out = convert_to_hcl({"region": "us-east-2"})
    assert out.splitlines()[0] == 'region = "us-east-2"'


def test_nested_keys_stay_quoted():
    out = convert_to_hcl({"tags": {"Name": "x"}})
    lines = out.splitlines()
    assert lines[0].startswith("tags = {")
    assert any(line.strip().startswith('"Name"') for line in lines)
    assert lines[-1] == "}"


def test_keys_are_sorted():
    out = convert_to_hcl({"b": 1, "a": 2})
    names = [line.split(" = ")[0] for line in out.splitlines()]
    assert names == sorted(names)


def test_booleans_and_null_use_keywords():
    out = convert_to_hcl({"enabled": True, "missing": None})
    assert "enabled = true" in out.splitlines()
    assert "missing = null" in out.splitlines()


def test_list_of_scalars_on_one_line():
    out = convert_to_hcl({"zones": ["a", "b"]})
    assert out.splitlines() == ['zones = ["a", "b"]']


def test_non_mapping_raises():
    with pytest.raises(ValueError):
        convert_to_hcl(["a", "b"])


def test_write_to_file_matches_conversion(tmp_path):
    data = {"name": "vpc", "count": 3}
    target = tmp_path / "vars.tfvars"
    write_to_file_as_hcl(str(target), data, 0o644)
    assert target.read_text(encoding="utf-8") == convert_to_hcl(data)


def test_print_as_hcl(capsys):
    data = {"stage": "dev"}
    print_as_hcl(data)
    assert capsys.readouterr().out == convert_to_hcl(data)


def test_backend_file(tmp_path):
    target = tmp_path / "backend.tf"
    write_terraform_backend_config_to_file_as_hcl(
        str(target), "s3", {"bucket": "b", "encrypt": True}
    )
    assert target.read_text(encoding="utf-8") == (
        'terraform {\n  backend "s3" {\n    bucket  = "b"\n    encrypt = true\n  }\n}\n'
    )


def test_backend_skips_unsupported_values(tmp_path):
    target = tmp_path / "backend.tf"
    write_terraform_backend_config_to_file_as_hcl(
        str(target), "s3", {"bucket": "b", "tags": {"a": 1}, "retries": 5}
    )
    content = target.read_text(encoding="utf-8")
    assert "tags" not in content
    assert "retries = 5" in content


def test_backend_aligns_equals_signs(tmp_path):
    target = tmp_path / "backend.tf"
    write_terraform_backend_config_to_file_as_hcl(
        str(target), "s3", {"a": "x", "workspace_key_prefix": "y", "key": None}
    )
    lines = [line for line in target.read_text(encoding="utf-8").splitlines() if " = " in line]
    assert len(lines) == 3
    assert len({line.index("=") for line in lines}) == 1