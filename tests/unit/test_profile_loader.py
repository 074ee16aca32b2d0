"""Tests for profile loading and inheritance."""

from __future__ import annotations

import pytest

from bundleguard.profile.loader import default_profile, load_profile, load_profile_from_string
from bundleguard.profile.models import Profile


def test_default_profile():
    profile = default_profile()
    assert profile.name == "umd-sdk"
    assert profile.export_name == "OptaveJavaScriptSDK"
    assert profile.excluded_dependencies == ("ajv",)
    assert "browser-umd" in profile.build_targets


def test_load_minimal():
    profile = load_profile_from_string("name: minimal\nexport_name: Foo\n")
    assert profile.name == "minimal"
    assert profile.export_name == "Foo"
    assert profile.build_token == Profile().build_token


def test_string_becomes_list():
    profile = load_profile_from_string("name: t\nexcluded_dependencies: lodash\n")
    assert profile.excluded_dependencies == ("lodash",)


def test_inherit_preset(custom_profile_path):
    profile = load_profile(custom_profile_path)
    assert profile.name == "custom-sdk"
    assert profile.export_name == "CustomSDK"
    assert profile.excluded_dependencies == ("ajv", "lodash")
    assert profile.build_targets == ("web",)
    assert profile.dependency_applies_to == ("*browser*",)
    assert profile.inherit == ("preset:umd-sdk",)


def test_inherit_file(tmp_path):
    parent = tmp_path / "parent.yaml"
    parent.write_text("name: parent\nexport_name: ParentSDK\nbuild_targets: [a, b]\n")
    child = tmp_path / "child.yaml"
    child.write_text(f"name: child\ninherit: {parent}\nbuild_targets: [c]\n")

    profile = load_profile(child)
    assert profile.export_name == "ParentSDK"
    assert profile.build_targets == ("c",)


def test_circular_inheritance(tmp_path):
    a = tmp_path / "a.yaml"
    b = tmp_path / "b.yaml"
    a.write_text(f"name: a\ninherit: {b}\n")
    b.write_text(f"name: b\ninherit: {a}\n")
    with pytest.raises(ValueError, match="Circular"):
        load_profile(a)


def test_unknown_preset():
    with pytest.raises(ValueError, match="Unknown profile preset"):
        load_profile_from_string("name: x\ninherit: preset:nope\n")


def test_unknown_keys():
    with pytest.raises(ValueError, match="Unknown profile keys: colour"):
        load_profile_from_string("name: x\ncolour: blue\n")


def test_not_a_mapping():
    with pytest.raises(ValueError, match="mapping"):
        load_profile_from_string("- a\n- b\n")


def test_bad_list_value():
    with pytest.raises(ValueError, match="must be a list"):
        load_profile_from_string("name: x\nbuild_targets:\n  key: value\n")


def test_bad_string_value():
    with pytest.raises(ValueError, match="must be a string"):
        load_profile_from_string("name: x\nexport_name: [a, b]\n")


def test_unnamed_profiles_inherit(tmp_path):
    base = tmp_path / "base.yaml"
    base.write_text("export_name: BaseSDK\n")
    child = tmp_path / "child.yaml"
    child.write_text(f"inherit: {base}\nbuild_targets: [web]\n")

    profile = load_profile(child)
    assert profile.name == "unnamed"
    assert profile.export_name == "BaseSDK"
    assert profile.build_targets == ("web",)


def test_shared_parent_is_not_circular(tmp_path):
    a = tmp_path / "a.yaml"
    b = tmp_path / "b.yaml"
    c = tmp_path / "c.yaml"
    a.write_text("name: a\ninherit: preset:umd-sdk\nexport_name: ASDK\n")
    b.write_text("name: b\ninherit: preset:umd-sdk\nbuild_targets: [web]\n")
    c.write_text(f"name: c\ninherit:\n  - {a}\n  - {b}\n")

    profile = load_profile(c)
    assert profile.export_name == "ASDK"
    assert profile.build_targets == ("web",)


def test_self_inheritance_is_circular(tmp_path):
    a = tmp_path / "a.yaml"
    a.write_text(f"name: a\ninherit: {a}\n")
    with pytest.raises(ValueError, match="Circular"):
        load_profile(a)
