import json
import math
import numbers
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

SUPPRESSION_METHODS = ("subpixel", "fast")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base without mutating inputs."""
    merged = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def load_config(
    default_path: Path | str = Path("configs/default.json"),
    local_path: Path | str = Path("configs/local.json"),
) -> Dict[str, Any]:
    """
    Load default config and optionally merge local overrides.
    """
    default_path = Path(default_path)
    local_path = Path(local_path)

    with default_path.open("r", encoding="utf-8") as f:
        base_cfg = json.load(f)

    if local_path.exists():
        with local_path.open("r", encoding="utf-8") as f:
            local_cfg = json.load(f)
        return _deep_merge(base_cfg, local_cfg)

    return base_cfg


def ensure_output_dirs(cfg: Dict[str, Any]) -> None:
    """
    Create output directories referenced by the config if they do not exist.
    """
    outputs = cfg.get("outputs", {})
    paths = [
        outputs.get("root"),
        outputs.get("debug_dir"),
        Path(outputs.get("metrics_csv", "")).parent if outputs.get("metrics_csv") else None,
        Path(outputs.get("report_txt", "")).parent if outputs.get("report_txt") else None,
    ]
    for p in paths:
        if not p:
            continue
        Path(p).mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class CannyParams:
    filter_size: int = 5
    sigma: float = 1.4
    low_threshold: float = 0.1
    high_threshold: float = 0.3
    suppression: str = "subpixel"

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "CannyParams":
        """
        Build parameters from the 'canny' block of a config dict and validate them.
        """
        canny_cfg = cfg.get("canny", {})
        params = cls(
            filter_size=canny_cfg.get("filter_size", cls.filter_size),
            sigma=float(canny_cfg.get("sigma", cls.sigma)),
            low_threshold=float(canny_cfg.get("low_threshold", cls.low_threshold)),
            high_threshold=float(canny_cfg.get("high_threshold", cls.high_threshold)),
            suppression=str(canny_cfg.get("suppression", cls.suppression)),
        )
        params.validate()
        return params

    def validate(self) -> None:
        if isinstance(self.filter_size, bool) or not isinstance(self.filter_size, numbers.Integral):
            raise ValueError(f"filter_size must be an integer, got {self.filter_size!r}")
        if self.filter_size <= 0:
            raise ValueError(f"filter_size must be positive, got {self.filter_size}")
        if not (math.isfinite(self.sigma) and self.sigma > 0):
            raise ValueError(f"sigma must be a finite positive number, got {self.sigma}")
        for name in ("low_threshold", "high_threshold"):
            value = getattr(self, name)
            if not (math.isfinite(value) and 0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.low_threshold > self.high_threshold:
            raise ValueError(
                f"low_threshold ({self.low_threshold}) exceeds high_threshold ({self.high_threshold})"
            )
        if self.suppression not in SUPPRESSION_METHODS:
            raise ValueError(f"Unknown suppression method: {self.suppression}")
