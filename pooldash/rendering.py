"""
Pygame render loop for the pool dashboard.
Draws three stacked panels (network, pool, miner), each with six labelled values and
a line chart of its hashrate history, plus the block-confirmation gauge and a
connection dot. Reads only StatsBoard snapshots; quitting sets the shared stop event.
"""
import atexit
import logging
import threading
import time

import pygame

from pooldash.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS,
    BLACK, GRID_COLOR, WHITE, GREEN, LIGHT_GREEN, GRAY,
    HEADER_HEIGHT, FOOTER_HEIGHT, PANEL_MARGIN,
    POOL_NAME, VERSION, STABLE_COIN
)
from pooldash.data import Stats
from pooldash.helpers import (
    format_value, format_hashrate, status_color,
    axis_bounds, axis_labels, scale_points, render_adaptive_text
)
from pooldash.polling import StatsBoard

logger = logging.getLogger(__name__)

# Global display objects (initialized in init_pygame)
screen = None
clock = None
FONT_TITLE = None
FONT_LABEL = None
FONT_VALUE = None
FONT_AXIS = None

QUIT_KEYS = (pygame.K_q, pygame.K_ESCAPE)


def init_pygame():
    # Initialize Pygame, open the window and load fonts.
    global screen, clock, FONT_TITLE, FONT_LABEL, FONT_VALUE, FONT_AXIS

    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    except pygame.error as e:
        logger.critical(f"Display init failed: {e}")
        raise SystemExit(1)

    pygame.display.set_caption(POOL_NAME)
    clock = pygame.time.Clock()

    font_regular = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
    font_bold = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
    try:
        FONT_TITLE = pygame.font.Font(font_bold, 15)
        FONT_LABEL = pygame.font.Font(font_regular, 12)
        FONT_VALUE = pygame.font.Font(font_bold, 15)
        FONT_AXIS = pygame.font.Font(font_regular, 10)
    except FileNotFoundError:
        logger.warning("DejaVu fonts missing → using system fallback")
        FONT_TITLE = pygame.font.Font(None, 18)
        FONT_LABEL = pygame.font.Font(None, 15)
        FONT_VALUE = pygame.font.Font(None, 18)
        FONT_AXIS = pygame.font.Font(None, 13)


def cleanup():
    if pygame.get_init():
        pygame.quit()


def draw_stat(surface, rect: pygame.Rect, title: str, value: str):
    pygame.draw.rect(surface, GREEN, rect, 1)
    title_surf = FONT_LABEL.render(title, True, GREEN)
    surface.blit(title_surf, (rect.centerx - title_surf.get_width() // 2, rect.y + 2))
    value_surf = render_adaptive_text(value, rect.width - 6, LIGHT_GREEN, start_size=15, bold=True)
    surface.blit(value_surf, (rect.centerx - value_surf.get_width() // 2,
                              rect.bottom - value_surf.get_height() - 3))


def draw_gauge(surface, rect: pygame.Rect, percent: float):
    pygame.draw.rect(surface, GREEN, rect, 1)
    inner = rect.inflate(-4, -4)
    fill_w = int(inner.width * max(0.0, min(percent, 100.0)) / 100)
    pygame.draw.rect(surface, LIGHT_GREEN, (inner.x, inner.y, fill_w, inner.height))
    label = FONT_LABEL.render(f"{int(percent)}%", True, BLACK if percent > 50 else WHITE)
    surface.blit(label, (rect.centerx - label.get_width() // 2, rect.centery - label.get_height() // 2))


def draw_chart(surface, rect: pygame.Rect, name: str, x_title: str, y_title: str, points):
    pygame.draw.rect(surface, GRID_COLOR, rect, 1)
    for i in range(1, 4):
        y = rect.y + i * rect.height // 4
        pygame.draw.line(surface, GRID_COLOR, (rect.x + 2, y), (rect.right - 2, y), 1)

    name_surf = FONT_LABEL.render(name, True, WHITE)
    surface.blit(name_surf, (rect.x + 4, rect.y + 2))

    plot = rect.inflate(-40, -30)
    plot.x = rect.x + 36
    scaled = scale_points(points, plot.width, plot.height)
    if scaled:
        pygame.draw.lines(surface, WHITE, False, [(plot.x + x, plot.y + y) for x, y in scaled], 1)

    low, high = axis_bounds([p[1] for p in points])
    for label, y in zip(axis_labels(low, high), (plot.bottom, plot.centery, plot.top)):
        surf = FONT_AXIS.render(label, True, GREEN)
        surface.blit(surf, (rect.x + 2, y - surf.get_height() // 2))

    if points:
        xs = [p[0] for p in points]
        x_text = f"{x_title} {int(min(xs))} … {int(max(xs))} ({y_title})"
    else:
        x_text = f"{x_title} ({y_title})"
    x_surf = FONT_AXIS.render(x_text, True, GREEN)
    surface.blit(x_surf, (plot.centerx - x_surf.get_width() // 2, rect.bottom - x_surf.get_height() - 2))


def draw_panel(surface, rect: pygame.Rect, title: str, left, right, chart):
    # left/right: three (title, value) pairs each; chart: (name, x_title, y_title, points)
    pygame.draw.rect(surface, GREEN, rect, 1)
    title_surf = FONT_TITLE.render(f" {title} ", True, GREEN, BLACK)
    surface.blit(title_surf, (rect.x + 10, rect.y - title_surf.get_height() // 2))

    inner = rect.inflate(-2 * PANEL_MARGIN, -2 * PANEL_MARGIN)
    half = inner.width // 2
    col_w = half // 2
    row_h = inner.height // 3
    cells = {}
    for col, stats_col in enumerate((left, right)):
        for row, (label, value) in enumerate(stats_col):
            cell = pygame.Rect(inner.x + col * col_w, inner.y + row * row_h, col_w - 4, row_h - 4)
            cells[(col, row)] = cell
            if label:
                draw_stat(surface, cell, label, value)

    chart_rect = pygame.Rect(inner.x + half, inner.y, inner.width - half, inner.height)
    draw_chart(surface, chart_rect, *chart)
    return cells


def draw_stats(surface, stats: Stats):
    body_h = SCREEN_HEIGHT - HEADER_HEIGHT - FOOTER_HEIGHT
    panel_h = body_h // 3
    panels = [
        pygame.Rect(PANEL_MARGIN, HEADER_HEIGHT + i * panel_h + PANEL_MARGIN,
                    SCREEN_WIDTH - 2 * PANEL_MARGIN, panel_h - 2 * PANEL_MARGIN)
        for i in range(3)
    ]

    net = stats.network
    draw_panel(
        surface, panels[0], "Network Stats",
        [("Network Hashrate", format_hashrate(net.hashrate.latest(), "Th/s")),
         ("Network Difficulty", format_value(net.difficulty, "P")),
         ("Block Height", str(net.height))],
        [("Block Reward", format_value(net.reward, "Σ")),
         ("Reward Reduction in", format_value(net.reward_reduction)),
         ("ERG Price", format_value(net.price, STABLE_COIN))],
        ("Network Hashrate", "Block", "Th/s", net.hashrate.points()),
    )

    pool = stats.pool
    cells = draw_panel(
        surface, panels[1], "Pool Stats",
        [("Pool Hashrate", format_hashrate(pool.hashrate.latest(), "Gh/s")),
         ("Connected Miners", str(pool.connected_miners)),
         ("Current Effort", format_value(pool.effort, "%"))],
        [("", ""),
         ("Blocks found", str(pool.total_blocks)),
         ("", "")],
        ("Pool Hashrate", "Block", "Gh/s", pool.hashrate.points()),
    )
    gauge_cell = cells[(1, 2)]
    label = FONT_LABEL.render("Confirming block", True, GREEN)
    surface.blit(label, (gauge_cell.centerx - label.get_width() // 2, gauge_cell.y + 2))
    draw_gauge(surface, gauge_cell.inflate(-8, -label.get_height() - 6).move(0, label.get_height() // 2 + 2),
               pool.confirming_new_block)

    miner = stats.miner
    draw_panel(
        surface, panels[2], "Miner Stats",
        [("Current Hashrate", format_hashrate(miner.hashrate.latest(), "Mh/s")),
         ("Average 24h Hashrate", format_value(miner.average_hashrate)),
         ("Round Contribution", format_value(miner.round_contribution))],
        [("Pending Shares", format_value(miner.pending_shares)),
         ("Pending Balance", format_value(miner.pending_balance)),
         ("Total Paid", format_value(miner.total_paid))],
        ("Miner Hashrate", "Time", "Mh/s", miner.hashrate.points()),
    )


def draw_frame(surface, stats: Stats, status: str, last_update):
    surface.fill(BLACK)

    pygame.draw.line(surface, GREEN, (0, HEADER_HEIGHT // 2), (SCREEN_WIDTH, HEADER_HEIGHT // 2), 1)
    title = FONT_TITLE.render(f" {POOL_NAME} ", True, GREEN, BLACK)
    surface.blit(title, ((SCREEN_WIDTH - title.get_width()) // 2, HEADER_HEIGHT // 2 - title.get_height() // 2))

    # Connection status dot (top-right)
    pygame.draw.circle(surface, status_color(status), (SCREEN_WIDTH - 14, HEADER_HEIGHT // 2), 5)

    draw_stats(surface, stats)

    footer_y = SCREEN_HEIGHT - FOOTER_HEIGHT // 2
    pygame.draw.line(surface, GREEN, (0, footer_y), (SCREEN_WIDTH, footer_y), 1)
    if last_update is not None:
        updated = time.strftime('%H:%M:%S', time.localtime(last_update))
        status_text = f" {status} · {updated} "
    else:
        status_text = f" {status} "
    status_surf = FONT_LABEL.render(status_text, True, GRAY, BLACK)
    surface.blit(status_surf, (10, footer_y - status_surf.get_height() // 2))
    version = FONT_LABEL.render(f" v{VERSION} ", True, GREEN, BLACK)
    surface.blit(version, (SCREEN_WIDTH - version.get_width() - 10, footer_y - version.get_height() // 2))


def is_quit_event(event) -> bool:
    if event.type == pygame.QUIT:
        return True
    return event.type == pygame.KEYDOWN and event.key in QUIT_KEYS


def run_render_loop(board: StatsBoard, stop_event: threading.Event):
    # Main render loop: FPS cap, quit handling, redraw from the latest snapshot.
    atexit.register(cleanup)

    while not stop_event.is_set():
        for event in pygame.event.get():
            if is_quit_event(event):
                logger.info("Quit requested")
                stop_event.set()

        stats, status, last_update = board.snapshot()
        draw_frame(screen, stats, status, last_update)
        pygame.display.flip()
        clock.tick(FPS)

    cleanup()
