"""Load, validate, and hot-reload the Flare tracker configuration.

The config lives in ``tracker_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_tracker_config()`` to re-read from
disk after an edit, no restart required.

Usage::

    from flare.tracking.config_loader import get_tracker_config

    config = get_tracker_config()
    config.phases.ovulation_max_day        # 16
    config.symptom_names("endo")           # ['pelvic_pain', 'cramping', ...]
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger("flare.tracking.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "tracker_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class PhaseThresholds:
    """Last cycle day (inclusive) of each non-menstrual phase.

    Days after ``luteal_max_day`` are classified as late luteal.
    """

    follicular_max_day: int = 14
    ovulation_max_day: int = 16
    luteal_max_day: int = 28


@dataclass
class TrackerConfig:
    """Complete, validated tracker configuration.

    Attributes:
        version:          Config schema version string.
        phases:           Cycle-day thresholds for phase classification.
        symptoms:         Symptom catalog: category → ordered symptom names.
        trend_window_days: Default length of the trailing trend series.
        export_prefix:    Filename prefix for exported data.
    """

    version: str
    phases: PhaseThresholds
    symptoms: dict[str, list[str]]
    trend_window_days: int = 30
    export_prefix: str = "flare-export"
    _raw: dict = field(default_factory=dict, repr=False)

    def symptom_names(self, category: str) -> list[str]:
        """Return the catalog for a category, or an empty list if unknown."""
        return list(self.symptoms.get(category, []))

    def is_known_symptom(self, category: str, name: str) -> bool:
        return name in self.symptoms.get(category, [])


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when tracker_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Tracker config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> TrackerConfig:
    """Validate the raw YAML dict and construct a TrackerConfig.

    Every problem is collected before raising so a single run reports them all.

    Raises:
        ConfigValidationError: If required fields are missing or invalid.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, name: str) -> int:
        value = section.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            errors.append(f"{name}.{key} must be an integer, got {value!r}")
            return default

    version = str(raw.get("version", "1.0"))

    # ── Phase thresholds ──
    ph_raw = raw.get("phases") or {}
    phases = PhaseThresholds(
        follicular_max_day=_int(ph_raw, "follicular_max_day", 14, "phases"),
        ovulation_max_day=_int(ph_raw, "ovulation_max_day", 16, "phases"),
        luteal_max_day=_int(ph_raw, "luteal_max_day", 28, "phases"),
    )
    if not (
        1 <= phases.follicular_max_day
        < phases.ovulation_max_day
        < phases.luteal_max_day
    ):
        errors.append(
            "phases must satisfy 1 <= follicular_max_day < ovulation_max_day "
            f"< luteal_max_day, got {phases.follicular_max_day}/"
            f"{phases.ovulation_max_day}/{phases.luteal_max_day}"
        )

    # ── Symptom catalog ──
    sym_raw = raw.get("symptoms") or {}
    symptoms: dict[str, list[str]] = {}
    for category in ("endo", "ibs"):
        names = sym_raw.get(category)
        if not names:
            errors.append(f"symptoms.{category} is missing or empty")
            continue
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            errors.append(f"symptoms.{category} must be a list of symptom names")
            continue
        if len(set(names)) != len(names):
            errors.append(f"symptoms.{category} contains duplicate names")
        symptoms[category] = names
    for category in sym_raw:
        if category not in ("endo", "ibs"):
            errors.append(f"symptoms.{category} is not a known category (expected endo, ibs)")

    # ── Trends / export ──
    tr_raw = raw.get("trends") or {}
    window_days = _int(tr_raw, "window_days", 30, "trends")
    if window_days < 1:
        errors.append(f"trends.window_days must be positive, got {window_days}")

    ex_raw = raw.get("export") or {}
    export_prefix = str(ex_raw.get("filename_prefix", "flare-export"))

    if errors:
        raise ConfigValidationError(
            f"tracker_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return TrackerConfig(
        version=version,
        phases=phases,
        symptoms=symptoms,
        trend_window_days=window_days,
        export_prefix=export_prefix,
        _raw=raw,
    )


def load_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Load and validate the tracker config from disk.

    Args:
        path: Override path to YAML. Uses the bundled tracker_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded tracker config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: TrackerConfig | None = None
_config_lock = threading.Lock()


def get_tracker_config() -> TrackerConfig:
    """Return the global TrackerConfig singleton, loading it on first call."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_tracker_config()
    return _config


def reload_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Reload the tracker config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_tracker_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded tracker config: %s → %s", old_version, new_config.version)
    return new_config
