from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULTS: Dict[str, Any] = {
    "seed": None,
    "progress": True,
    "color": True,
    "show_initial": True,
    "animate_delay": None,
}


class DotDict(dict):
    __getattr__ = dict.get
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__


def load_yaml(path: str | Path) -> DotDict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return DotDict(data)


def merge_overrides(cfg: Dict[str, Any], **overrides) -> Dict[str, Any]:
    for k, v in overrides.items():
        if v is None:
            continue
        cfg[k] = v
    return cfg


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def check_settings(cfg: Dict[str, Any]) -> None:
    """Raise ValueError naming the first setting whose value has the wrong type."""
    seed = cfg.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError(f"seed must be an integer or null, got {seed!r}")
    for key in ("progress", "color", "show_initial"):
        if not isinstance(cfg.get(key), bool):
            raise ValueError(f"{key} must be true or false, got {cfg.get(key)!r}")
    delay = cfg.get("animate_delay")
    if delay is not None and (not _is_number(delay) or delay < 0):
        raise ValueError(f"animate_delay must be a number >= 0 or null, got {delay!r}")


def load_settings(path: Optional[str | Path] = None, **overrides) -> DotDict:
    """Defaults, then the YAML file (if any), then non-None overrides; the result is type-checked."""
    cfg = DotDict(DEFAULTS)
    if path is not None:
        loaded = load_yaml(path)
        unknown = sorted(set(loaded) - set(DEFAULTS))
        if unknown:
            raise ValueError(f"{path}: unknown settings {unknown}")
        cfg.update(loaded)
    cfg = DotDict(merge_overrides(cfg, **overrides))
    check_settings(cfg)
    return cfg
