"""Entry point for the Tower of Sums prototype.

Wraps a SumStackEngine in an Arcade window: forwards frame time as ticks,
maps clicks on the grid to block selection and draws the latest snapshot.
"""
import logging

import arcade
from arcade import Window, run, set_background_color, color

from sumstack.components.game_state import GameMode, GameStatus
from sumstack.constants import CELL_SIZE, GRID_HEIGHT, GRID_WIDTH, HUD_HEIGHT, TUTORIAL_STEP_COUNT, WINDOW_MARGIN
from sumstack.engine import SumStackEngine
from sumstack.events.bus import EVENT_SHAKE

TUTORIAL_PAGES = [
    ("Welcome to Tower of Sums", "Keep the stones from piling up to the top of the tower."),
    ("Meet the oracle", "Click stones whose values add up exactly to the oracle number."),
    ("Clear the threat", "A matching sum shatters the stones. Going over the number resets your pick."),
    ("Two modes", "Classic: a row rises after every match. Time: a row rises every 10 seconds."),
]

STONE = (74, 63, 53)
STONE_SELECTED = (212, 175, 55)
PARCHMENT = (244, 228, 188)
DANGER = (153, 0, 0)


class SumStackWindow(Window):
    def __init__(self):
        width = GRID_WIDTH * CELL_SIZE + 2 * WINDOW_MARGIN
        height = GRID_HEIGHT * CELL_SIZE + HUD_HEIGHT + 2 * WINDOW_MARGIN
        super().__init__(width, height, "Tower of Sums")
        self.set_update_rate(1/60)
        self.engine = SumStackEngine()
        self._shake_remaining = 0.0
        self.engine.subscribe(EVENT_SHAKE, self._on_shake)
        set_background_color(color.BLACK)

    def _on_shake(self, sender, **payload):
        self._shake_remaining = 0.2

    # Geometry -------------------------------------------------------------

    def _cell_rect(self, row: int, col: int) -> tuple[float, float, float, float]:
        left = WINDOW_MARGIN + col * CELL_SIZE
        top = self.height - HUD_HEIGHT - WINDOW_MARGIN - row * CELL_SIZE
        return left, left + CELL_SIZE, top - CELL_SIZE, top

    def _cell_at(self, x: float, y: float) -> tuple[int, int] | None:
        col = int((x - WINDOW_MARGIN) // CELL_SIZE)
        row = int((self.height - HUD_HEIGHT - WINDOW_MARGIN - y) // CELL_SIZE)
        if 0 <= row < GRID_HEIGHT and 0 <= col < GRID_WIDTH:
            return row, col
        return None

    # Drawing --------------------------------------------------------------

    def on_draw(self):
        self.clear()
        snapshot = self.engine.snapshot()
        if snapshot.status == GameStatus.TUTORIAL:
            self._draw_tutorial(snapshot.tutorial_step)
            return
        self._draw_hud(snapshot)
        offset = 2 if self._shake_remaining > 0 else 0
        selected = set(snapshot.selected)
        for block in snapshot.blocks:
            left, right, bottom, top = self._cell_rect(block.row, block.col)
            fill = STONE_SELECTED if block.id in selected else STONE
            arcade.draw_lrbt_rectangle_filled(left + 2 + offset, right - 2 + offset, bottom + 2, top - 2, fill)
            arcade.draw_text(
                str(block.value),
                (left + right) / 2 + offset,
                (bottom + top) / 2,
                PARCHMENT,
                font_size=20,
                anchor_x="center",
                anchor_y="center",
            )
        if snapshot.status == GameStatus.IDLE:
            self._draw_banner("Tower of Sums", "1: classic   2: time   T: tutorial")
        elif snapshot.status == GameStatus.GAMEOVER:
            self._draw_banner("The tower has fallen", f"Score {snapshot.score}   R: restart   H: home", DANGER)

    def _draw_hud(self, snapshot):
        top = self.height - WINDOW_MARGIN
        arcade.draw_text(f"Oracle {snapshot.target}", WINDOW_MARGIN, top - 30, PARCHMENT, font_size=18)
        arcade.draw_text(f"Score {snapshot.score}", WINDOW_MARGIN, top - 60, PARCHMENT, font_size=14)
        arcade.draw_text(f"Best {snapshot.high_score:06d}", WINDOW_MARGIN, top - 85, PARCHMENT, font_size=12)
        right = self.width - WINDOW_MARGIN
        arcade.draw_text(f"Sum {snapshot.selection_sum}", right, top - 30, PARCHMENT, font_size=18, anchor_x="right")
        if snapshot.mode == GameMode.TIME and snapshot.time_left is not None:
            tint = DANGER if snapshot.time_left <= 3 else PARCHMENT
            arcade.draw_text(f"{snapshot.time_left}s", right, top - 60, tint, font_size=14, anchor_x="right")
        else:
            arcade.draw_text("Classic", right, top - 60, PARCHMENT, font_size=14, anchor_x="right")

    def _draw_banner(self, title: str, subtitle: str, tint=PARCHMENT):
        cx = self.width / 2
        cy = self.height / 2
        arcade.draw_lrbt_rectangle_filled(0, self.width, cy - 60, cy + 60, (26, 20, 16))
        arcade.draw_text(title, cx, cy + 15, tint, font_size=24, anchor_x="center")
        arcade.draw_text(subtitle, cx, cy - 25, PARCHMENT, font_size=12, anchor_x="center")

    def _draw_tutorial(self, step: int):
        title, body = TUTORIAL_PAGES[step]
        self._draw_banner(title, body)
        arcade.draw_text(
            f"{step + 1}/{TUTORIAL_STEP_COUNT}   arrows: page   Esc: close",
            self.width / 2,
            WINDOW_MARGIN,
            PARCHMENT,
            font_size=10,
            anchor_x="center",
        )

    # Input ----------------------------------------------------------------

    def on_update(self, delta_time: float):
        if self._shake_remaining > 0:
            self._shake_remaining = max(0.0, self._shake_remaining - delta_time)
        if self.engine.status == GameStatus.PLAYING:
            self.engine.tick(delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        if button != arcade.MOUSE_BUTTON_LEFT:
            return
        cell = self._cell_at(x, y)
        if cell is None:
            return
        block = self.engine.snapshot().block_at(*cell)
        if block is not None:
            self.engine.select_block(block.id)

    def on_key_press(self, symbol: int, modifiers: int):
        engine = self.engine
        if symbol == arcade.key.KEY_1:
            engine.start_game(GameMode.CLASSIC)
        elif symbol == arcade.key.KEY_2:
            engine.start_game(GameMode.TIME)
        elif symbol == arcade.key.R:
            engine.restart_game()
        elif symbol == arcade.key.T:
            engine.open_tutorial()
        elif symbol == arcade.key.RIGHT:
            engine.next_tutorial_step()
        elif symbol == arcade.key.LEFT:
            engine.previous_tutorial_step()
        elif symbol in (arcade.key.H, arcade.key.ESCAPE):
            if engine.status == GameStatus.TUTORIAL:
                engine.close_tutorial()
            else:
                engine.go_home()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    window = SumStackWindow()
    run()

if __name__ == "__main__":
    main()
