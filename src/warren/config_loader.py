"""Load RoutingConfig from warren.yaml / warren.toml if present.

Merges file config with CLI kwargs. CLI overrides file.

Example ``warren.yaml``::

    warren:
      conventions: [template]
      pattern_regex: '(.+)\\.md'
      export: render
      missing_export: warn

"""

from __future__ import annotations

import re
from pathlib import Path

from warren._errors import ConfigError
from warren.config import RoutingConfig
from warren.routes.conventions import Convention, MethodFiles, PageRouteFiles, TemplatePattern

_KEYS = frozenset({
    "conventions",
    "pattern",
    "pattern_regex",
    "export",
    "missing_export",
    "module_prefix",
})


def load_config(root: Path, *, config_dir: Path | None = None, **overrides: object) -> RoutingConfig:
    """Load RoutingConfig for *root*, optionally merging a config file.

    Looks for warren.yaml, warren.yml, or warren.toml in *config_dir*
    (default: *root*). Overrides whose value is *None* are ignored; the rest
    take precedence over the file.

    Raises:
        ConfigError: On unreadable config files or invalid values.

    """
    file_config = _read_warren_config(config_dir or root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}

    unknown = set(merged) - _KEYS
    if unknown:
        msg = f"Unknown warren config keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    kwargs: dict[str, object] = {}
    if "missing_export" in merged:
        kwargs["missing_export"] = merged["missing_export"]
    if "module_prefix" in merged:
        kwargs["module_prefix"] = merged["module_prefix"]
    kwargs["conventions"] = _build_conventions(merged)
    return RoutingConfig(root=root, **kwargs)  # type: ignore[arg-type]


def _build_conventions(merged: dict[str, object]) -> tuple[Convention, ...]:
    names = merged.get("conventions")
    if names is None:
        names = ["template"] if ("pattern" in merged or "pattern_regex" in merged) else [
            "methods", "pages",
        ]
    if isinstance(names, str):
        names = [names]
    if not isinstance(names, list):
        msg = f"conventions must be a list, got {type(names).__name__}"
        raise ConfigError(msg)

    conventions: list[Convention] = []
    for name in names:
        if name == "methods":
            conventions.append(MethodFiles())
        elif name == "pages":
            conventions.append(PageRouteFiles())
        elif name == "template":
            conventions.append(_build_template(merged))
        else:
            msg = f"Unknown convention {name!r} (expected methods, pages, or template)"
            raise ConfigError(msg)
    return tuple(conventions)


def _build_template(merged: dict[str, object]) -> TemplatePattern:
    export = str(merged.get("export") or "render")
    literal = merged.get("pattern")
    regex = merged.get("pattern_regex")
    if literal and regex:
        msg = "Set either pattern or pattern_regex, not both"
        raise ConfigError(msg)
    if regex:
        try:
            return TemplatePattern(re.compile(str(regex)), export=export)
        except re.error as exc:
            msg = f"Invalid pattern_regex {regex!r}: {exc}"
            raise ConfigError(msg) from exc
    if literal:
        return TemplatePattern(str(literal), export=export)
    msg = "The template convention requires pattern or pattern_regex"
    raise ConfigError(msg)


def _read_warren_config(directory: Path) -> dict[str, object]:
    """Read warren config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("warren.yaml", "warren.yml"):
        path = directory / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = directory / "warren.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    import yaml

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_warren_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    import tomllib

    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_warren_section(data)


def _flatten_warren_section(data: dict[str, object]) -> dict[str, object]:
    """Extract warren.* keys into top-level config."""
    result: dict[str, object] = {}
    warren = data.get("warren")
    if isinstance(warren, dict):
        for k, v in warren.items():
            result[k] = v
    for k, v in data.items():
        if k != "warren" and k in _KEYS:
            result[k] = v
    return result
