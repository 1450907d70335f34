"""
Unit scaling and the shared "update or retain" step for every normalized field.
"""
import logging
import math
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)

TERA = 1_000_000_000_000
PETA = 1_000_000_000_000_000
GIGA = 1_000_000_000


def round_half_away(value: float) -> float:
    # Nearest integer, ties away from zero (2.5 → 3, -2.5 → -3)
    return math.copysign(math.floor(abs(value) + 0.5), value)


def round2(value: float) -> float:
    return round_half_away(value * 100) / 100


def to_th(raw: float) -> float:
    # H/s → Th/s
    return round2(raw / TERA)


def to_gh(raw: float) -> float:
    # H/s → Gh/s
    return round2(raw / GIGA)


def to_peta(raw: float) -> float:
    # network difficulty shown in P
    return round2(raw / PETA)


def effort_percent(raw: float) -> float:
    # fraction → percent, two decimals
    return round_half_away(raw * 10000) / 100


def progress_percent(raw: float) -> float:
    return min(100.0, max(0.0, round2(raw * 100)))


def passthrough(raw: Any) -> Any:
    return raw


# Field name → scaling function
SCALING = {
    "network_hashrate": to_th,
    "network_difficulty": to_peta,
    "pool_hashrate": to_gh,
    "connected_miners": passthrough,
    "pool_effort": effort_percent,
    "total_blocks": passthrough,
    "confirmation_progress": progress_percent,
}


def normalize_field(raw: Optional[Any], scale: Callable[[Any], Any], prior: Any,
                    name: str) -> Tuple[Any, Optional[str]]:
    # Return (next value, warning). Absent raw keeps the prior value and yields a warning.
    if raw is None:
        return prior, f"No data available for {name}"
    return scale(raw), None


def apply_field(raw: Optional[Any], field: str, prior: Any, name: str) -> Any:
    # normalize_field with the scaling table, logging the warning if any
    value, warning = normalize_field(raw, SCALING[field], prior, name)
    if warning:
        logger.warning(warning)
    return value
