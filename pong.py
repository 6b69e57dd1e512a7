
import sys
import logging
import argparse

import numpy as np
import pygame

from pong_sim import (
    WIDTH, HEIGHT, PADDLE_RADIUS, SETTING_MIN, SETTING_MAX,
    GameLoop, MovePaddle, TogglePause, SetBallSpeed, SetBotDifficulty,
    BALL_SPEED_KEY, BOT_DIFFICULTY_KEY, clamp, new_game, on_setting, pause_hint,
)
from pong_settings import SettingsStore, load_preferences, persist_settings

logger = logging.getLogger(__name__)

PANEL_H = 90
FPS = 60
FONT_NAME = "arial"

WHITE = (240, 240, 240)
BG = (25, 25, 30)
PANEL_BG = (35, 35, 42)
DIM = (120, 120, 140)
ACCENT = (120, 200, 255)


class Slider:
    """Integer range control (1-10), dragged with the mouse."""

    def __init__(self, label, rect, value):
        self.label = label
        self.rect = pygame.Rect(rect)
        self.value = value
        self.dragging = False

    def value_at(self, mx):
        frac = clamp((mx - self.rect.x) / max(1, self.rect.w), 0.0, 1.0)
        return SETTING_MIN + round(frac * (SETTING_MAX - SETTING_MIN))

    def hit(self, pos):
        return self.rect.inflate(0, 16).collidepoint(pos)

    def draw(self, surface, font):
        frac = (self.value - SETTING_MIN) / (SETTING_MAX - SETTING_MIN)
        pygame.draw.rect(surface, (0, 0, 0), self.rect, border_radius=8)
        pygame.draw.rect(surface, DIM, self.rect, 2, border_radius=8)
        fill = pygame.Rect(self.rect.x + 2, self.rect.y + 2, int((self.rect.w - 4) * frac), self.rect.h - 4)
        if fill.w > 0:
            pygame.draw.rect(surface, ACCENT, fill, border_radius=7)
        knob = pygame.Rect(0, 0, 12, self.rect.h + 8)
        knob.center = (self.rect.x + int(self.rect.w * frac), self.rect.centery)
        pygame.draw.rect(surface, WHITE, knob, border_radius=6)
        text = font.render(f"{self.label}: {self.value}", True, WHITE)
        surface.blit(text, (self.rect.x, self.rect.y - 24))


def draw_center_dashed_line(surface):
    dash_h = 18
    gap = 12
    x = WIDTH // 2 - 2
    for y in range(0, HEIGHT, dash_h + gap):
        pygame.draw.rect(surface, (70, 70, 80), (x, y, 4, dash_h), border_radius=2)


def draw(screen, state, fonts, sliders):
    font_small, font_big = fonts
    fld = state.playfield
    screen.fill(BG)
    draw_center_dashed_line(screen)

    for p in (state.left, state.right):
        pygame.draw.rect(screen, WHITE, pygame.Rect(round(p.x), round(p.y), p.width, p.height),
                         border_radius=PADDLE_RADIUS)
    r = fld.ball_size / 2
    pygame.draw.circle(screen, WHITE, (round(state.ball.x + r), round(state.ball.y + r)), r)

    score_text = font_big.render(f"{state.score.left}   {state.score.right}", True, WHITE)
    screen.blit(score_text, (WIDTH // 2 - score_text.get_width() // 2, 20))

    # settings panel
    pygame.draw.rect(screen, PANEL_BG, (0, HEIGHT, WIDTH, PANEL_H))
    for s in sliders:
        s.draw(screen, font_small)
    hint = font_small.render(pause_hint(state.paused), True, DIM)
    screen.blit(hint, (WIDTH - hint.get_width() - 20, HEIGHT + PANEL_H - 30))


def handle_events(loop, sliders):
    """Translate pygame input into intents; they are applied at the start of the next tick."""
    speed_slider, bot_slider = sliders
    setters = {speed_slider: SetBallSpeed, bot_slider: SetBotDifficulty}
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            pygame.quit(); sys.exit(0)
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                pygame.quit(); sys.exit(0)
            if event.key == pygame.K_SPACE:
                loop.post(TogglePause())
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for s in sliders:
                if s.hit(event.pos):
                    s.dragging = True
                    loop.post(setters[s](s.value_at(event.pos[0])))
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            for s in sliders:
                s.dragging = False
        if event.type == pygame.MOUSEMOTION:
            # playfield sits at the top-left of the window, so window y is playfield y
            loop.post(MovePaddle(event.pos[1]))
            for s in sliders:
                if s.dragging:
                    value = s.value_at(event.pos[0])
                    if value != s.value:
                        loop.post(setters[s](value))


def game(store, fps=FPS, seed=None):
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT + PANEL_H))
    pygame.display.set_caption("Pong")
    clock = pygame.time.Clock()
    fonts = (pygame.font.SysFont(FONT_NAME, 20), pygame.font.SysFont(FONT_NAME, 54, bold=True))

    ball_speed, bot_difficulty = load_preferences(store)
    rng = np.random.default_rng(seed)
    loop = GameLoop(new_game(ball_speed, bot_difficulty, rng=rng), rng=rng)
    loop.subscribe(persist_settings(store))

    sliders = (
        Slider("Ball Speed", (40, HEIGHT + 45, 300, 16), ball_speed),
        Slider("Bot Difficulty", (400, HEIGHT + 45, 200, 16), bot_difficulty),
    )

    # slider knobs follow the applied (clamped) values
    by_key = {BALL_SPEED_KEY: sliders[0], BOT_DIFFICULTY_KEY: sliders[1]}
    loop.subscribe(on_setting(lambda key, value: setattr(by_key[key], "value", value)))

    def next_frame():
        pygame.display.flip()
        clock.tick(fps)
        handle_events(loop, sliders)

    loop.run(lambda state: draw(screen, state, fonts, sliders), next_frame)


def headless(store, frames, seed=None):
    ball_speed, bot_difficulty = load_preferences(store)
    rng = np.random.default_rng(seed)
    loop = GameLoop(new_game(ball_speed, bot_difficulty, rng=rng), rng=rng)
    loop.run(lambda state: None, lambda: None, frames=frames)
    score = loop.state.score
    print(f"{frames} frames: left {score.left}, right {score.right}")
    return loop.state


def main(argv=None):
    parser = argparse.ArgumentParser(description="Pong against a simple bot")
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument("--settings", default=None, help="path of the settings file")
    parser.add_argument("--seed", type=int, default=None, help="seed for serve angles")
    parser.add_argument("--headless", type=int, default=0, metavar="FRAMES",
                        help="simulate FRAMES frames without a window and print the score")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    store = SettingsStore(args.settings)

    if args.headless:
        headless(store, args.headless, seed=args.seed)
    else:
        game(store, fps=args.fps, seed=args.seed)


if __name__ == "__main__":
    main()
