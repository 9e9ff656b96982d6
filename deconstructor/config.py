from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .graph.layout import LayoutConfig

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_STATE_DIR = Path("~/.deconstructor")

API_URL_ENV = "DECONSTRUCTOR_API_URL"
STATE_DIR_ENV = "DECONSTRUCTOR_STATE_DIR"


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration files."""


@dataclass(frozen=True)
class DeconstructorConfig:
    api_url: str = DEFAULT_API_URL
    timeout_s: float = 60.0
    state_dir: Path = DEFAULT_STATE_DIR
    static_dir: Path | None = None
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    @property
    def resolved_state_dir(self) -> Path:
        return self.state_dir.expanduser()


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _number(section: dict[str, Any], key: str, default: float, where: str) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}.{key} must be a number")
    if value < 0:
        raise ConfigError(f"{where}.{key} must not be negative")
    return float(value)


def load_config(path: Path | None = None, *, environ: dict[str, str] | None = None) -> DeconstructorConfig:
    """
    Load configuration from TOML, then apply environment overrides.

    Missing file or sections fall back to defaults.
    """
    import tomllib

    env = os.environ if environ is None else environ

    data: dict[str, Any] = {}
    if path is not None:
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigError(f"config file not found: {path}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"invalid TOML in {path}: {e}") from e

    analyze = _coerce_dict(data.get("analyze"))
    storage = _coerce_dict(data.get("storage"))
    layout = _coerce_dict(data.get("layout"))

    api_url = str(analyze.get("api_url", DEFAULT_API_URL)).strip() or DEFAULT_API_URL
    timeout_s = _number(analyze, "timeout_s", 60.0, "analyze")

    state_dir = Path(str(storage.get("state_dir", DEFAULT_STATE_DIR)))
    static_raw = storage.get("static_dir")
    static_dir = Path(str(static_raw)) if isinstance(static_raw, str) and static_raw.strip() else None

    defaults = LayoutConfig()
    layout_cfg = LayoutConfig(
        part_gap=_number(layout, "part_gap", defaults.part_gap, "layout"),
        origin_gap=_number(layout, "origin_gap", defaults.origin_gap, "layout"),
        combination_gap=_number(layout, "combination_gap", defaults.combination_gap, "layout"),
        vertical_gap=_number(layout, "vertical_gap", defaults.vertical_gap, "layout"),
    )

    cfg = DeconstructorConfig(
        api_url=api_url,
        timeout_s=timeout_s,
        state_dir=state_dir,
        static_dir=static_dir,
        layout=layout_cfg,
    )

    if env.get(API_URL_ENV, "").strip():
        cfg = replace(cfg, api_url=env[API_URL_ENV].strip())
    if env.get(STATE_DIR_ENV, "").strip():
        cfg = replace(cfg, state_dir=Path(env[STATE_DIR_ENV].strip()))

    return cfg
