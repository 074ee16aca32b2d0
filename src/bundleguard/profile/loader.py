"""Load and resolve Profile objects from YAML files."""

from __future__ import annotations

import importlib.resources
from pathlib import Path

import yaml

from bundleguard.profile.models import Profile, profile_keys, tuple_keys

_PRESET_PREFIX = "preset:"
DEFAULT_PRESET = "umd-sdk"


def load_profile(path: str | Path, _chain: set[str] | None = None) -> Profile:
    """Load a profile from a YAML file path."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return _build_profile(
        _parse(text),
        _chain=_chain if _chain is not None else set(),
        key=str(path.resolve()),
    )


def load_profile_from_string(text: str) -> Profile:
    """Parse a YAML string into a Profile, resolving inheritance."""
    return _build_profile(_parse(text), _chain=set())


def default_profile() -> Profile:
    """The packaged profile used when no --profile is given."""
    return _load_preset(DEFAULT_PRESET, set())


def _parse(text: str) -> dict:
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Profile YAML must be a mapping")
    return data


def _build_profile(data: dict, _chain: set[str], key: str | None = None) -> Profile:
    """Build a profile, resolving parents depth-first.

    ``_chain`` holds the file paths and preset refs currently being
    resolved, so only a profile inheriting from its own ancestor is
    circular. Siblings may share a parent.
    """
    if key is not None:
        if key in _chain:
            raise ValueError(f"Circular profile inheritance detected: {key}")
        _chain.add(key)
    try:
        return _resolve(data, _chain)
    finally:
        if key is not None:
            _chain.discard(key)


def _resolve(data: dict, _chain: set[str]) -> Profile:
    unknown = set(data) - profile_keys()
    if unknown:
        raise ValueError(f"Unknown profile keys: {', '.join(sorted(unknown))}")

    inherit_list = data.get("inherit", [])
    if isinstance(inherit_list, str):
        inherit_list = [inherit_list]

    # Parents apply in order, own keys override them
    values: dict = {}
    for ref in inherit_list:
        parent = _load_ref(ref, _chain)
        values.update(_explicit_values(parent))

    values.update(_normalize(data))
    values["name"] = data.get("name", "unnamed")
    values["inherit"] = tuple(inherit_list)
    return Profile(**values)


def _normalize(data: dict) -> dict:
    sequences = tuple_keys()
    values: dict = {}
    for key, value in data.items():
        if key == "inherit" or value is None:
            continue
        if key in sequences:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list):
                raise ValueError(f"Profile key '{key}' must be a list")
            value = tuple(str(v) for v in value)
        elif not isinstance(value, str):
            raise ValueError(f"Profile key '{key}' must be a string")
        values[key] = value
    return values


def _explicit_values(profile: Profile) -> dict:
    defaults = Profile()
    return {
        key: getattr(profile, key)
        for key in profile_keys() - {"name", "description", "inherit"}
        if getattr(profile, key) != getattr(defaults, key)
    }


def _load_ref(ref: str, _chain: set[str]) -> Profile:
    if ref.startswith(_PRESET_PREFIX):
        preset_name = ref[len(_PRESET_PREFIX) :]
        return _load_preset(preset_name, _chain)
    # Treat as file path
    return load_profile(ref, _chain=_chain)


def _load_preset(name: str, _chain: set[str]) -> Profile:
    filename = f"{name}.yaml"
    pkg = importlib.resources.files("bundleguard.profile.presets")
    resource = pkg.joinpath(filename)
    if not resource.is_file():
        raise ValueError(f"Unknown profile preset: {name}")
    text = resource.read_text(encoding="utf-8")
    return _build_profile(_parse(text), _chain, key=f"{_PRESET_PREFIX}{name}")
