import json

import pytest
import yaml

from stackmerge.serialize import (
    convert_from_json,
    convert_to_json,
    convert_to_json_fast,
    convert_to_yaml,
    print_as_json,
    print_as_yaml,
    write_to_file_as_json,
    write_to_file_as_yaml,
)

DATA = {"b": [1, 2], "a": {"x": "y"}}


def test_json_round_trip():
    assert convert_from_json(convert_to_json(DATA)) == DATA


def test_json_sorted_and_indented():
    text = convert_to_json({"b": 1, "a": 2})
    assert text.index('"a"') < text.index('"b"')
    assert '\n   "a"' in text


def test_json_escapes_html():
    text = convert_to_json({"k": "<&>"})
    assert "<" not in text and "&" not in text
    assert json.loads(text) == {"k": "<&>"}


def test_json_non_string_keys():
    assert convert_from_json(convert_to_json({1: "one"})) == {"1": "one"}


def test_json_fast_compact():
    text = convert_to_json_fast(DATA)
    assert " " not in text
    assert json.loads(text) == DATA


def test_json_fast_rounds_floats():
    assert json.loads(convert_to_json_fast({"f": 1.23456789}))["f"] == pytest.approx(1.234568)


def test_convert_from_json_invalid():
    with pytest.raises(ValueError):
        convert_from_json("{not json")


def test_yaml_round_trip():
    assert yaml.safe_load(convert_to_yaml(DATA)) == DATA


def test_print_functions(capsys):
    print_as_json(DATA)
    print_as_yaml(DATA)
    out = capsys.readouterr().out
    assert '"a"' in out and "a:\n" in out


def test_write_files(tmp_path):
    jpath = tmp_path / "o.json"
    ypath = tmp_path / "o.yaml"
    write_to_file_as_json(str(jpath), DATA, 0o644)
    write_to_file_as_yaml(str(ypath), DATA, 0o644)
    assert json.loads(jpath.read_text()) == DATA
    assert yaml.safe_load(ypath.read_text()) == DATA