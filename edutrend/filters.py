from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

LEVELS: Tuple[str, ...] = ("SD", "SMP", "SMA")

HORIZON_MIN = 1
HORIZON_MAX = 5
DEFAULT_HORIZON = 1


@dataclass(frozen=True)
class Selection:
    region: str = ""
    level: str = ""
    horizon: int = DEFAULT_HORIZON

    @property
    def is_complete(self) -> bool:
        return bool(self.region) and bool(self.level)


def _as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def clamp_horizon(value: object) -> int:
    try:
        horizon = int(value)
    except (TypeError, ValueError):
        horizon = DEFAULT_HORIZON
    return max(HORIZON_MIN, min(HORIZON_MAX, horizon))


def normalize_selection(raw: dict, *, available_regions: Optional[Iterable[str]] = None) -> Selection:
    region = _as_str(raw.get("region"))
    if available_regions is not None and region not in set(available_regions):
        region = ""

    level = _as_str(raw.get("level"))
    if level not in LEVELS:
        level = ""

    horizon = clamp_horizon(raw.get("horizon", DEFAULT_HORIZON))

    return Selection(region=region, level=level, horizon=horizon)
