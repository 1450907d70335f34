"""
Formatting and chart-scaling utilities shared by the render loop.
Pure functions over snapshot values; no pygame state here except adaptive text.
"""
import logging
from typing import List, Sequence, Tuple

import pygame

from pooldash.constants import GREEN, ORANGE, RED
from pooldash.polling import STATUS_LIVE, STATUS_UNREACHABLE

logger = logging.getLogger(__name__)


def format_value(value: float, unit: str = "") -> str:
    # Integers stay integers, floats keep their two normalized decimals.
    if isinstance(value, float) and not value.is_integer():
        text = f"{value:.2f}"
    else:
        text = f"{int(value)}"
    return f"{text} {unit}" if unit else text


def format_hashrate(value: float, unit: str) -> str:
    return f"{value:.2f} {unit}"


def status_color(status: str) -> Tuple[int, int, int]:
    # Connection indicator:
    #  - GREEN:  last cycle succeeded
    #  - RED:    a source was unreachable
    #  - ORANGE: still connecting
    if status == STATUS_LIVE:
        return GREEN
    if status == STATUS_UNREACHABLE:
        return RED
    return ORANGE


def axis_bounds(values: Sequence[float], pad: float = 0.1) -> Tuple[float, float]:
    # (min, max) padded by 10% of the extremes; (0, 0) for an empty series.
    if not values:
        return 0.0, 0.0
    low, high = min(values), max(values)
    return low - low * pad, high + high * pad


def axis_labels(low: float, high: float) -> List[str]:
    # Low / mid / high labels rounded to two decimals.
    return [f"{round(v, 2):g}" for v in (low, (low + high) / 2, high)]


def scale_points(points: Sequence[Tuple[float, float]], width: int,
                 height: int) -> List[Tuple[int, int]]:
    # Map (x, y) data points to pixel coordinates inside a width×height box (y grows down).
    if len(points) < 2:
        return []
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = axis_bounds(ys)
    x_range = max(max_x - min_x, 0.001)
    y_range = max(max_y - min_y, 0.001)

    result = []
    for x, y in points:
        px = int((x - min_x) / x_range * (width - 1))
        py = height - 1 - int((y - min_y) / y_range * (height - 1))
        result.append((px, py))
    return result


def render_adaptive_text(text: str, max_width: int, color: Tuple[int, int, int],
                         start_size: int = 16, min_size: int = 8,
                         font_name: str = "dejavusans", bold: bool = False) -> pygame.Surface:
    # Render text by reducing font size until it fits max_width.
    size = start_size
    while size >= min_size:
        font = pygame.font.SysFont(font_name, size, bold=bold)
        surf = font.render(text, True, color)
        if surf.get_width() <= max_width:
            return surf
        size -= 1

    font = pygame.font.SysFont(font_name, min_size, bold=bold)
    return font.render(text, True, color)
