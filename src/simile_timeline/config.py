"""
Timeline configuration.

Bands, layout and scale settings for a timeline, loadable from a YAML file
and overridable from the environment.

Environment Variables:
    SIMILE_TIMELINE_CONFIG             Path to a YAML config file
    SIMILE_TIMELINE_MIN_LABEL_SPACING  Minimum pixels between scale labels
    SIMILE_TIMELINE_MAX_TICKS          Cap on ticks per band
    SIMILE_TIMELINE_TRACK_HEIGHT       Layout track height (px)
    SIMILE_TIMELINE_TRACK_GAP          Layout track gap (px)
    SIMILE_TIMELINE_LABEL_CHAR_WIDTH   Average label character width (px)

YAML Format:
    bands:
      - interval_unit: day
        interval_pixels: 100
      - interval_unit: month
        interval_pixels: 200
        ether: hotzone
        hot_zones:
          - {start: "1939-09-01", end: "1945-09-02", magnify: 3}
    layout:
      track_height: 24
    scale:
      min_label_spacing: 90
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from simile_timeline.application.ether import ETHER_TYPES, Ether, create_ether, hot_zone_from_dict
from simile_timeline.application.layout import LayoutConfig
from simile_timeline.application.scale import ScaleSettings
from simile_timeline.core.exceptions import ConfigError
from simile_timeline.domain.entities.timeline import HotZone, IntervalUnit

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "SIMILE_TIMELINE_CONFIG"

# env var -> (section, option, type)
_ENV_OVERRIDES: dict[str, tuple[str, str, type]] = {
    "SIMILE_TIMELINE_MIN_LABEL_SPACING": ("scale", "min_label_spacing", float),
    "SIMILE_TIMELINE_MAX_TICKS": ("scale", "max_ticks", int),
    "SIMILE_TIMELINE_TRACK_HEIGHT": ("layout", "track_height", float),
    "SIMILE_TIMELINE_TRACK_GAP": ("layout", "track_gap", float),
    "SIMILE_TIMELINE_LABEL_CHAR_WIDTH": ("layout", "label_char_width", float),
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    """intervalPixels -> interval_pixels"""
    return _CAMEL_RE.sub("_", key).lower()


def _normalize_keys(data: Mapping[str, Any], allowed: set[str], section: str) -> dict[str, Any]:
    normalized = {_snake(str(k)): v for k, v in data.items()}
    unknown = set(normalized) - allowed
    if unknown:
        raise ConfigError(f"Unknown {section} option(s): {', '.join(sorted(unknown))}")
    return normalized


def _build(cls: type, data: Any, section: str) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ConfigError(f"'{section}' must be a mapping, got {type(data).__name__}")
    options = _normalize_keys(data, {f.name for f in fields(cls)}, section)
    try:
        return cls(**options)
    except TypeError as e:
        raise ConfigError(f"Invalid {section} config: {e}") from e


# =============================================================================
# Band
# =============================================================================


@dataclass(frozen=True)
class BandConfig:
    """
    One synchronized band of the timeline.

    Attributes:
        interval_unit: Unit the band is scaled in
        interval_pixels: Pixels per unit at base density
        ether: "linear", "logarithmic" or "hotzone"
        base: Logarithm base (logarithmic ether)
        hot_zones: Magnified ranges (hotzone ether)
        track_height: Per-band layout override
        track_gap: Per-band layout override
        width: Renderer hint for the band's share of the height, e.g. "70%"
    """

    interval_unit: IntervalUnit
    interval_pixels: float
    ether: str = "linear"
    base: float = 10.0
    hot_zones: tuple[HotZone, ...] = ()
    track_height: float | None = None
    track_gap: float | None = None
    width: str | None = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "interval_unit", IntervalUnit.parse(self.interval_unit))
        except ValueError as e:
            raise ConfigError(str(e)) from e
        object.__setattr__(self, "hot_zones", tuple(self.hot_zones))
        # Fail at construction rather than at first render
        self.build_ether()

    def build_ether(self) -> Ether:
        return create_ether(
            self.ether,
            self.interval_unit,
            self.interval_pixels,
            base=self.base,
            hot_zones=self.hot_zones,
        )

    def layout_overrides(self) -> dict[str, float]:
        """Layout options this band overrides."""
        overrides: dict[str, float] = {}
        if self.track_height is not None:
            overrides["track_height"] = self.track_height
        if self.track_gap is not None:
            overrides["track_gap"] = self.track_gap
        return overrides

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BandConfig:
        if not isinstance(data, Mapping):
            raise ConfigError(f"Band config must be a mapping, got {type(data).__name__}")
        options = _normalize_keys(data, {f.name for f in fields(cls)}, "band")
        for required in ("interval_unit", "interval_pixels"):
            if required not in options:
                raise ConfigError(f"Band config is missing {required!r}")
        zones = options.get("hot_zones") or ()
        if not isinstance(zones, (list, tuple)):
            raise ConfigError("Band 'hot_zones' must be a list")
        options["hot_zones"] = tuple(
            z if isinstance(z, HotZone) else hot_zone_from_dict(z) for z in zones
        )
        return cls(**options)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "interval_unit": self.interval_unit.value,
            "interval_pixels": self.interval_pixels,
            "ether": self.ether,
        }
        if self.ether.lower().startswith("log"):
            data["base"] = self.base
        if self.hot_zones:
            data["hot_zones"] = [z.to_dict() for z in self.hot_zones]
        for name in ("track_height", "track_gap", "width"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


def _default_bands() -> tuple[BandConfig, ...]:
    return (
        BandConfig(IntervalUnit.DAY, 100),
        BandConfig(IntervalUnit.MONTH, 200),
    )


# =============================================================================
# Timeline
# =============================================================================


@dataclass(frozen=True)
class TimelineConfig:
    """Everything the coordinate layer needs to lay out a timeline."""

    bands: tuple[BandConfig, ...] = field(default_factory=_default_bands)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    scale: ScaleSettings = field(default_factory=ScaleSettings)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bands", tuple(self.bands))
        if not self.bands:
            raise ConfigError("A timeline needs at least one band")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> TimelineConfig:
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"Timeline config must be a mapping, got {type(data).__name__}")
        options = _normalize_keys(data, {"bands", "layout", "scale"}, "timeline")

        kwargs: dict[str, Any] = {
            "layout": _build(LayoutConfig, options.get("layout"), "layout"),
            "scale": _build(ScaleSettings, options.get("scale"), "scale"),
        }
        if options.get("bands") is not None:
            bands = options["bands"]
            if not isinstance(bands, list):
                raise ConfigError("'bands' must be a list")
            kwargs["bands"] = tuple(BandConfig.from_dict(b) for b in bands)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bands": [b.to_dict() for b in self.bands],
            "layout": self.layout.to_dict(),
            "scale": self.scale.to_dict(),
        }

    @classmethod
    def from_yaml(cls, path: str | Path) -> TimelineConfig:
        """
        Load a config file.

        Raises:
            ConfigError: unreadable file, invalid YAML or invalid values
        """
        path = Path(path)
        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file '{path}': {e}") from e
        try:
            raw_data = yaml.safe_load(raw_text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in '{path}': {e}") from e

        if raw_data is not None and not isinstance(raw_data, dict):
            raise ConfigError(f"Config file '{path}' is not a YAML mapping")

        config = cls.from_dict(raw_data)
        logger.info(f"Loaded timeline config from {path} ({len(config.bands)} bands)")
        return config

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), allow_unicode=True, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TimelineConfig:
        """Load from SIMILE_TIMELINE_CONFIG (if set), then apply env overrides."""
        env = os.environ if environ is None else environ

        path = env.get(ENV_CONFIG_PATH)
        config = cls.from_yaml(path) if path else cls()

        sections: dict[str, dict[str, Any]] = {"layout": {}, "scale": {}}
        for var, (section, option, cast) in _ENV_OVERRIDES.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            try:
                sections[section][option] = cast(raw)
            except ValueError as e:
                raise ConfigError(f"{var} must be {cast.__name__}, got {raw!r}") from e

        if sections["layout"]:
            config = replace(config, layout=replace(config.layout, **sections["layout"]))
        if sections["scale"]:
            config = replace(config, scale=replace(config.scale, **sections["scale"]))
        return config


# Singleton config
_timeline_config: TimelineConfig | None = None


def get_timeline_config() -> TimelineConfig:
    """Process-wide config, loaded from the environment on first use."""
    global _timeline_config
    if _timeline_config is None:
        _timeline_config = TimelineConfig.from_env()
    return _timeline_config


def configure_timeline(config: TimelineConfig | None) -> None:
    """Replace the process-wide config (None reloads from the environment on next use)."""
    global _timeline_config
    _timeline_config = config


__all__ = [
    "BandConfig",
    "TimelineConfig",
    "LayoutConfig",
    "ScaleSettings",
    "ETHER_TYPES",
    "get_timeline_config",
    "configure_timeline",
]
