"""Solver settings: built-in defaults, optionally overridden by a YAML file and then by command-line flags."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULTS: Dict[str, Any] = {
    "techniques": [
        "single_candidate",
        "hidden_single",
        "naked_pair",
        "naked_triple",
        "naked_quad",
        "hidden_pair",
        "hidden_triple",
        "hidden_quad",
        "locked_candidates",
        "x_wing",
        "swordfish",
        "xy_wing",
        "xyz_wing",
    ],
    "bifurcation": True,
    "max_steps": 500,
    "max_moves": 5,
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


def load_config(path: Optional[str | Path] = None, **overrides) -> DotDict:
    """Defaults <- YAML file (if any) <- non-None keyword overrides."""
    cfg = DotDict({k: (list(v) if isinstance(v, list) else v) for k, v in DEFAULTS.items()})
    if path is not None:
        cfg.update(load_yaml(path))
    merge_overrides(cfg, **overrides)
    unknown = [t for t in (cfg.techniques or []) if t not in DEFAULTS["techniques"]]
    if unknown:
        raise ValueError(f"Unknown technique(s): {', '.join(unknown)}")
    return cfg
