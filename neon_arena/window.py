"""
Arcade front end: the draw surface, the input source, the HUD and the frame
driver for the interactive game.

The simulation works in canvas coordinates (origin top-left, y down); arcade
draws with y up, so every point is flipped on the way out.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import arcade

from .hud import Panel
from .utils import Color, Viewport, clamp
from .world import Session

logger = logging.getLogger("neon_arena.window")

BG = (13, 13, 21)
HUD_C = (220, 220, 220)
HEALTH_C = (0, 255, 204)
HEALTH_BG = (60, 60, 60)
PANEL_BG = (13, 13, 21, 200)

KEY_NAMES = {
    arcade.key.W: "w",
    arcade.key.A: "a",
    arcade.key.S: "s",
    arcade.key.D: "d",
    arcade.key.UP: "up",
    arcade.key.DOWN: "down",
    arcade.key.LEFT: "left",
    arcade.key.RIGHT: "right",
}


@dataclass
class _DrawState:
    # Canvas-style affine transform (a, b, c, d, e, f)
    matrix: Tuple[float, float, float, float, float, float] = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
    alpha: float = 1.0
    glow: Optional[Color] = None
    blur: float = 0.0


class ArcadeSurface:
    """Renderer contract implemented with arcade primitives"""

    def __init__(self, viewport: Viewport):
        self.viewport = viewport
        self._state = _DrawState()
        self._stack: List[_DrawState] = []

    # Transform / state stack

    def save(self):
        self._stack.append(replace(self._state))

    def restore(self):
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, dx: float, dy: float):
        a, b, c, d, e, f = self._state.matrix
        self._state.matrix = (a, b, c, d, e + a * dx + c * dy, f + b * dx + d * dy)

    def rotate(self, angle: float):
        a, b, c, d, e, f = self._state.matrix
        cos, sin = math.cos(angle), math.sin(angle)
        self._state.matrix = (
            a * cos + c * sin,
            b * cos + d * sin,
            c * cos - a * sin,
            d * cos - b * sin,
            e,
            f,
        )

    def set_alpha(self, alpha: float):
        self._state.alpha = clamp(alpha, 0.0, 1.0)

    def set_glow(self, color: Optional[Color], blur: float):
        self._state.glow = color
        self._state.blur = blur

    # Primitives

    def _to_screen(self, x: float, y: float) -> Tuple[float, float]:
        a, b, c, d, e, f = self._state.matrix
        cx = a * x + c * y + e
        cy = b * x + d * y + f
        return cx, self.viewport.height - cy

    def _rgba(self, color: Color, scale: float = 1.0):
        return (color[0], color[1], color[2], int(255 * self._state.alpha * scale))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color):
        if self._state.glow is not None and self._state.blur > 0:
            pad = self._state.blur / 2
            halo = [self._to_screen(px, py) for px, py in (
                (x - pad, y - pad), (x + w + pad, y - pad),
                (x + w + pad, y + h + pad), (x - pad, y + h + pad),
            )]
            arcade.draw_polygon_filled(halo, self._rgba(self._state.glow, 0.3))

        points = [self._to_screen(px, py) for px, py in (
            (x, y), (x + w, y), (x + w, y + h), (x, y + h),
        )]
        arcade.draw_polygon_filled(points, self._rgba(color))

    def fill_circle(self, x: float, y: float, radius: float, color: Color):
        sx, sy = self._to_screen(x, y)
        if self._state.glow is not None and self._state.blur > 0:
            arcade.draw_circle_filled(sx, sy, radius + self._state.blur / 2, self._rgba(self._state.glow, 0.3))
        arcade.draw_circle_filled(sx, sy, radius, self._rgba(color))

    def overlay(self, color: Color, alpha: float):
        arcade.draw_lrbt_rectangle_filled(
            0, self.viewport.width, 0, self.viewport.height,
            (color[0], color[1], color[2], int(255 * alpha)),
        )


class ArenaWindow(arcade.Window):
    """Arcade window that drives, renders and feeds input to a Session"""

    def __init__(self, session: Session, title: str = "Neon Arena", interactive: bool = True,
                 resizable: bool = True, fullscreen: bool = False):
        super().__init__(
            int(session.viewport.width), int(session.viewport.height), title,
            resizable=resizable, fullscreen=fullscreen,
        )
        self.session = session
        self.interactive = interactive
        self.surface = ArcadeSurface(session.viewport)
        self.background_color = BG

        if fullscreen:
            session.viewport.width, session.viewport.height = self.get_size()

    # ----------------------------
    # Frame driver
    # ----------------------------

    def on_update(self, delta_time: float):
        # Headless env steps the session itself; the window only draws then
        if not self.interactive:
            return
        elapsed_ms = delta_time * 1000.0
        self.session.scheduler.advance(elapsed_ms)
        self.session.update(elapsed_ms)

    def on_draw(self):
        self.clear()
        self.session.draw(self.surface)
        self.draw_hud()

    # ----------------------------
    # HUD
    # ----------------------------

    def draw_hud(self):
        hud = self.session.hud
        height = self.session.viewport.height
        width = self.session.viewport.width

        bar_w, bar_h = 200, 12
        x0, y0 = 12, height - 24
        arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, y0, y0 + bar_h, HEALTH_BG)
        fill = bar_w * clamp(hud.health_percent / 100.0, 0, 1)
        if fill > 0:
            arcade.draw_lrbt_rectangle_filled(x0, x0 + fill, y0, y0 + bar_h, HEALTH_C)

        txt = (f"SCORE: {hud.score}   "
               f"LEVEL: {hud.level}   "
               f"ENEMIES LEFT: {hud.enemies_left}")
        arcade.draw_text(txt, 12, height - 48, HUD_C, 14)

        if hud.is_visible(Panel.START):
            self._draw_panel("NEON ARENA", "WASD to move, mouse to aim and fire. Click or press ENTER to start.")
        elif hud.is_visible(Panel.GAME_OVER):
            self._draw_panel("GAME OVER", f"Final score: {hud.final_score}. Click or press ENTER to restart.")
        elif hud.is_visible(Panel.LEVEL_BANNER):
            arcade.draw_text(hud.banner_title, width / 2, height / 2, HEALTH_C, 40,
                             anchor_x="center", anchor_y="center")

    def _draw_panel(self, title: str, subtitle: str):
        width = self.session.viewport.width
        height = self.session.viewport.height
        arcade.draw_lrbt_rectangle_filled(0, width, 0, height, PANEL_BG)
        arcade.draw_text(title, width / 2, height / 2 + 30, HEALTH_C, 40,
                         anchor_x="center", anchor_y="center")
        arcade.draw_text(subtitle, width / 2, height / 2 - 20, HUD_C, 16,
                         anchor_x="center", anchor_y="center")

    # ----------------------------
    # Input source
    # ----------------------------

    def _confirm(self):
        """Start from the title panel or restart from game over"""
        hud = self.session.hud
        if hud.is_visible(Panel.START):
            self.session.start()
        elif hud.is_visible(Panel.GAME_OVER):
            self.session.restart()

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == arcade.key.ESCAPE:
            self.close()
            return
        if symbol in (arcade.key.ENTER, arcade.key.RETURN, arcade.key.SPACE):
            self._confirm()
            return
        name = KEY_NAMES.get(symbol)
        if name is not None:
            self.session.controls.press(name)

    def on_key_release(self, symbol: int, modifiers: int):
        name = KEY_NAMES.get(symbol)
        if name is not None:
            self.session.controls.release(name)

    def on_mouse_motion(self, x: int, y: int, dx: int, dy: int):
        pointer = self.session.controls.pointer
        pointer.x = x
        pointer.y = self.session.viewport.height - y

    def on_mouse_drag(self, x: int, y: int, dx: int, dy: int, buttons: int, modifiers: int):
        self.on_mouse_motion(x, y, dx, dy)

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int):
        if button != arcade.MOUSE_BUTTON_LEFT:
            return
        hud = self.session.hud
        if hud.is_visible(Panel.START) or hud.is_visible(Panel.GAME_OVER):
            self._confirm()
            return
        self.session.controls.pointer.down = True

    def on_mouse_release(self, x: int, y: int, button: int, modifiers: int):
        if button == arcade.MOUSE_BUTTON_LEFT:
            self.session.controls.pointer.down = False

    def on_resize(self, width: int, height: int):
        super().on_resize(width, height)
        self.session.viewport.width = width
        self.session.viewport.height = height
        logger.debug(f"Viewport resized to {width}x{height}")

    def on_deactivate(self):
        # Focus loss would otherwise leave keys stuck down
        self.session.controls.clear()
