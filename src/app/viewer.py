# src/app/viewer.py
#!/usr/bin/env python3
"""
PCB Creepage Viewer — paint a board, read the creepage distance

- Mouse:
    left click/drag   -> apply the active tool
    right click/drag  -> erase
- Keyboard:
    [S]/[E]      -> place Start / End pad
    [T]/[L]/[X]  -> draw Trace / sLot, eraser
    [C]          -> clear board
    [1]/[2]/[3]  -> load preset board
    [F]          -> animate the A* frontier on every change
    [+]/[-]      -> frontier steps/sec
    [Q]/[ESC]    -> quit

Settings: see src/app/settings.py (env CREEPAGE_* or --key=value).
"""

# --- bootstrap import path so `from src...` works when run as a script ---
import sys, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

import logging
from typing import List, Tuple, Optional
import pygame

from src.app import theme_skin as THEME
from src.app.settings import Settings, SettingsError, configure_logging, resolve_settings
from src.core.astar import CreepageAStar
from src.core.board_editor import BoardEditor, ToolMode, STATUS_OK, STATUS_NO_PATH
from src.core.presets import PRESET_ORDER
from src.core.types import Cell, CellType

logger = logging.getLogger(__name__)

# ---------- Config ----------
PANEL_W = 340            # right band: result card + tools + legend
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 22
MIN_WIN_H = 600
FONT_NAME = None  # default pygame font

TOOLS: List[Tuple[ToolMode, str, int]] = [
    (ToolMode.SET_START,  "Start Point",  pygame.K_s),
    (ToolMode.SET_END,    "End Point",    pygame.K_e),
    (ToolMode.DRAW_TRACE, "Copper Trace", pygame.K_t),
    (ToolMode.DRAW_SLOT,  "Slot/Cutout",  pygame.K_l),
    (ToolMode.ERASER,     "Eraser",       pygame.K_x),
]
PRESET_LABELS = {
    "blank":        "Blank",
    "slot_barrier": "Slot",
    "trace_fence":  "Fence",
}
LEGEND = [
    (CellType.INSULATOR, "Insulator (PCB)"),
    (CellType.TRACE,     "Copper Trace (Obstacle)"),
    (CellType.SLOT,      "Slot / Cutout (Obstacle)"),
    (CellType.SOURCE,    "Source (Start)"),
    (CellType.TARGET,    "Target (End)"),
    (CellType.PATH,      "Calculated Creepage Path"),
]


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font, theme: THEME.Theme):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (255, 255, 255, 18)
        bg_hover  = (255, 255, 255, 36)
        bg_active = (*theme.accent, 120)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, theme.accent, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, theme.text)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, settings: Settings):
        pygame.init()

        self.settings = settings
        self.theme = THEME.get_theme(settings.theme)
        self.editor = BoardEditor.blank(settings.cols, settings.rows, cell_mm=settings.cell_mm)
        self.selected_preset = settings.preset
        if settings.preset != "blank":
            self.editor.load_preset(settings.preset)

        self.cell_size = self._auto_cell_size()
        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 24)
        self.font_huge = pygame.font.Font(FONT_NAME, 48)

        board = self.editor.board
        grid_px_w = GRID_MARGIN*2 + board.width * self.cell_size
        grid_px_h = GRID_MARGIN*2 + board.height * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, MIN_WIN_H)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("PCB Creepage")

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        # frontier animation (optional overlay)
        self.show_frontier = False
        self.anim: Optional[CreepageAStar] = None
        self.open_set: set[Cell] = set()
        self.closed_set: set[Cell] = set()
        self.steps_per_sec = 60
        self._last_step_t = 0.0

        self._painting: Optional[ToolMode] = None
        self._last_painted: Optional[Cell] = None
        self.clock = pygame.time.Clock()
        logger.info("viewer started: %dx%d board, %.3g mm/cell, preset %s, theme %s",
                    board.width, board.height, settings.cell_mm, settings.preset, self.theme.name)

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and place the board."""
        board = self.editor.board
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(6, min(avail_w // board.width, avail_h // board.height)))

        grid_plate_w = board.width * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = board.height * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - PANEL_W - grid_plate_w) // 2)
        top_y  = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(win_w - PANEL_W, 0, PANEL_W, win_h)
        self._build_buttons()

    def _auto_cell_size(self) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(8, min(CELL_SIZE_DEFAULT, target_h // self.editor.board.height))

    def _cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        c = (col, row)
        return c if self.editor.board.in_bounds(c) else None

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.anim is not None:
                self._tick_animation()
            self._draw()
            self.clock.tick(60)

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.VIDEORESIZE:
                w, h = max(PANEL_W + 200, e.w), max(MIN_WIN_H, e.h)
                self.screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
                self._layout(w, h)
            elif e.type == pygame.MOUSEBUTTONDOWN:
                if any(b.handle_mouse(e) for b in self._buttons):
                    continue
                if e.button in (1, 3):
                    self._painting = self.editor.tool if e.button == 1 else ToolMode.ERASER
                    self._last_painted = None
                    self._paint_at(e.pos)
            elif e.type == pygame.MOUSEMOTION:
                for b in self._buttons:
                    b.handle_mouse(e)
                if self._painting is not None:
                    self._paint_at(e.pos)
            elif e.type == pygame.MOUSEBUTTONUP:
                self._painting = None

    def _handle_key(self, key: int):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        for tool, _label, hotkey in TOOLS:
            if key == hotkey:
                self._select_tool(tool)
                return
        if key == pygame.K_c:
            self._clear()
        elif key == pygame.K_f:
            self._toggle_frontier()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self.steps_per_sec = min(600, self.steps_per_sec + 20)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self.steps_per_sec = max(1, self.steps_per_sec - 20)
        elif key in (pygame.K_1, pygame.K_2, pygame.K_3):
            self._switch_preset(PRESET_ORDER[key - pygame.K_1])

    def _paint_at(self, pos: Tuple[int, int]):
        c = self._cell_at(pos)
        # motion events repeat while the pointer stays inside one cell
        if c is None or c == self._last_painted:
            return
        self._last_painted = c
        if self.editor.apply_tool(c[0], c[1], self._painting):
            self._board_changed()

    # ---------- actions ----------
    def _select_tool(self, tool: ToolMode):
        self.editor.set_tool(tool)
        self._refresh_active_states()

    def _clear(self):
        self.editor.clear()
        self.selected_preset = "blank"
        self._board_changed()

    def _switch_preset(self, name: str):
        try:
            self.editor.load_preset(name)
        except (KeyError, ValueError) as ex:
            logger.error("Failed to load preset %s: %s", name, ex)
            return
        self.selected_preset = name
        logger.info("preset %s loaded", name)
        self._board_changed()

    def _toggle_frontier(self):
        self.show_frontier = not self.show_frontier
        self._board_changed()

    def _board_changed(self):
        self.open_set.clear()
        self.closed_set.clear()
        self.anim = None
        ed = self.editor
        if self.show_frontier and ed.start is not None and ed.end is not None:
            self.anim = CreepageAStar()
            self.anim.init(ed.board.copy(), ed.start, ed.end)
        self._refresh_active_states()

    def _tick_animation(self):
        now = time.time()
        due = int((now - self._last_step_t) * self.steps_per_sec)
        if due <= 0:
            return
        self._last_step_t = now
        for _ in range(min(due, self.steps_per_sec)):
            res = self.anim.step()
            self.open_set.update(res.opened)
            self.open_set.difference_update(res.closed)
            self.closed_set.update(res.closed)
            if res.status != "running":
                self.anim = None
                return

    # ---------- drawing ----------
    def _draw(self):
        THEME.draw_backdrop(self.screen, self.theme)
        self._draw_grid()
        THEME.glass_panel(self.screen, self._right_band.inflate(-16, -16), self.theme)
        self._draw_panel()
        pygame.display.flip()

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        board = self.editor.board
        colors = self.theme.cells

        for row in range(board.height):
            for col in range(board.width):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                pygame.draw.rect(self.screen, colors[board.cells[row][col]], rect)
                pygame.draw.rect(self.screen, self.theme.border, rect, 1)

        if self.show_frontier:
            for tint, cells in ((self.theme.closed_tint, self.closed_set),
                                (self.theme.open_tint, self.open_set)):
                s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(tint)
                for (col, row) in cells:
                    self.screen.blit(s, (ox + col*cs, oy + row*cs))

        # path: hidden while the frontier is still being animated
        path = self.editor.path
        if len(path) >= 2 and self.anim is None:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col, row) in path]
            glow = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.lines(glow, self.theme.path_glow, False, pts, max(5, cs // 2))
            self.screen.blit(glow, (0, 0), special_flags=pygame.BLEND_ADD)
            pygame.draw.lines(self.screen, self.theme.path, False, pts, max(2, cs // 6))

    # ---------- buttons + panel ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 24
        y = rb.y + 190  # leaves space for the result card above
        w = rb.width - 48
        h = 32
        gap = 8
        half = (w - gap) // 2

        self.tool_buttons: dict[ToolMode, UIButton] = {}
        for i, (tool, label, _key) in enumerate(TOOLS):
            bx = x if i % 2 == 0 else x + half + gap
            btn = UIButton(label, pygame.Rect(bx, y, half, h),
                           lambda t=tool: self._select_tool(t), togglable=True)
            self.tool_buttons[tool] = btn
            self._buttons.append(btn)
            if i % 2 == 1:
                y += h + gap
        self._buttons.append(UIButton("Clear Board", pygame.Rect(x + half + gap, y, half, h), self._clear))
        y += h + gap

        self.btn_frontier = UIButton("Show Frontier", pygame.Rect(x, y, w, h),
                                     self._toggle_frontier, togglable=True)
        self._buttons.append(self.btn_frontier)
        y += h + gap

        third = (w - 2*gap) // 3
        self.preset_buttons: dict[str, UIButton] = {}
        for i, name in enumerate(PRESET_ORDER):
            rect = pygame.Rect(x + i*(third + gap), y, third, h)
            btn = UIButton(PRESET_LABELS[name], rect, lambda n=name: self._switch_preset(n), togglable=True)
            self.preset_buttons[name] = btn
            self._buttons.append(btn)
        self._legend_y = y + h + 18

        self._refresh_active_states()

    def _refresh_active_states(self):
        for tool, btn in getattr(self, "tool_buttons", {}).items():
            btn.set_active(self.editor.tool is tool)
        if hasattr(self, "btn_frontier"):
            self.btn_frontier.set_active(getattr(self, "show_frontier", False))
        for name, btn in getattr(self, "preset_buttons", {}).items():
            btn.set_active(self.selected_preset == name)

    def _draw_panel(self):
        rb = self._right_band
        th = self.theme
        x0 = rb.x + 24
        y0 = rb.y + 24

        def line(text, font=None, color=None, dy=6):
            nonlocal y0
            surf = (font or self.font).render(text, True, color or th.text)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + dy

        # ---- RESULT CARD ----
        line("CREEPAGE RESULT", self.font_big, th.accent)
        line(f"{self.editor.distance_mm:.2f} mm", self.font_huge, dy=2)
        line("Surface Distance", self.font_small, th.accent)

        status = self.editor.status
        color = th.ok if status == STATUS_OK else th.error if status == STATUS_NO_PATH else th.warn
        line(status, color=color)
        if self.show_frontier:
            line(f"Frontier: {self.steps_per_sec} steps/s", self.font_small)

        # ---- BUTTONS ----
        for b in self._buttons:
            b.draw(self.screen, self.font_small, th)

        # ---- LEGEND ----
        y0 = self._legend_y
        line("LEGEND", self.font_small, th.accent)
        for cell, label in LEGEND:
            sw = pygame.Rect(x0, y0, 14, 14)
            pygame.draw.rect(self.screen, th.cells[cell], sw, border_radius=3)
            surf = self.font_small.render(label, True, th.text)
            self.screen.blit(surf, (x0 + 22, y0))
            y0 += 20


# ---------- main ----------
def main():
    try:
        settings = resolve_settings()
    except SettingsError as ex:
        print(f"Invalid settings: {ex}")
        sys.exit(2)
    configure_logging(settings)
    Viewer(settings).run()

if __name__ == "__main__":
    main()
