"""
Headless Pong simulation: paddles, ball, scoring and the bot paddle.

No pygame in here. The front ends (pong.py, dashboard.py) post intents into a
GameLoop and draw whatever state it leaves behind, so the same rules run in
the window, in the dashboard and in the tests.
"""
import math
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

# --- Config ---
WIDTH, HEIGHT = 800, 500
PADDLE_W, PADDLE_H = 12, 100
BALL_SIZE = 16
PADDLE_INSET = 10       # gap between a paddle and its side wall
PADDLE_MARGIN = 10      # paddles never get closer than this to top/bottom
PADDLE_RADIUS = 7

MAX_BOUNCE = math.pi / 3
SERVE_MIN_ANGLE = math.pi / 9
SERVE_MAX_ANGLE = math.pi / 3.5

SETTING_MIN, SETTING_MAX = 1, 10
DEFAULT_BALL_SPEED = 5
DEFAULT_BOT_DIFFICULTY = 4

LEFT, RIGHT = "left", "right"

# event kinds
WALL = "wall"
PADDLE = "paddle"
SCORE = "score"
PAUSE = "pause"
SETTING = "setting"

BALL_SPEED_KEY = "ballSpeed"
BOT_DIFFICULTY_KEY = "botDifficulty"


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def clamp_setting(value) -> int:
    return int(clamp(round(value), SETTING_MIN, SETTING_MAX))


def pause_hint(paused: bool) -> str:
    return "Press Space to Unpause" if paused else "Press Space to Pause"


def on_setting(callback: Callable[[str, int], None]) -> Callable[["Event"], None]:
    """Listener that hands every preference change to callback(key, value)."""
    def listener(ev):
        if ev.kind == SETTING:
            callback(ev.key, ev.value)
    return listener


# -----------------------------
# Entity state
# -----------------------------
@dataclass
class Field:
    width: float = WIDTH
    height: float = HEIGHT
    ball_size: float = BALL_SIZE
    margin: float = PADDLE_MARGIN

    @property
    def paddle_top(self):
        return self.margin

    def paddle_bottom(self, paddle_h):
        return self.height - paddle_h - self.margin


@dataclass
class Paddle:
    x: float
    y: float
    width: float = PADDLE_W
    height: float = PADDLE_H

    @property
    def center_y(self):
        return self.y + self.height / 2

    @property
    def right_edge(self):
        return self.x + self.width

    def clamp_to(self, fld: Field):
        self.y = clamp(self.y, fld.paddle_top, fld.paddle_bottom(self.height))


@dataclass
class Ball:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0

    @property
    def speed(self):
        return math.hypot(self.vx, self.vy)

    @property
    def angle(self):
        return math.atan2(self.vy, self.vx)

    def set_velocity(self, angle, speed):
        self.vx = speed * math.cos(angle)
        self.vy = speed * math.sin(angle)

    def rescale(self, speed):
        # keep the heading, change only the magnitude
        self.set_velocity(self.angle, speed)


@dataclass
class Score:
    left: int = 0
    right: int = 0

    def award(self, side):
        if side == LEFT:
            self.left += 1
        else:
            self.right += 1


@dataclass
class Event:
    kind: str
    side: Optional[str] = None
    key: Optional[str] = None
    value: Optional[Union[int, bool]] = None  # setting value, or the paused flag


@dataclass
class SimState:
    playfield: Field
    left: Paddle
    right: Paddle
    ball: Ball
    score: Score = field(default_factory=Score)
    ball_speed: int = DEFAULT_BALL_SPEED
    bot_difficulty: int = DEFAULT_BOT_DIFFICULTY
    paused: bool = False


def new_game(ball_speed=DEFAULT_BALL_SPEED, bot_difficulty=DEFAULT_BOT_DIFFICULTY,
             rng: Optional[np.random.Generator] = None, fld: Optional[Field] = None) -> SimState:
    """Both paddles centred, ball served from the middle in a random direction."""
    fld = fld or Field()
    rng = rng if rng is not None else np.random.default_rng()
    mid = fld.height / 2 - PADDLE_H / 2
    state = SimState(
        playfield=fld,
        left=Paddle(PADDLE_INSET, mid),
        right=Paddle(fld.width - PADDLE_W - PADDLE_INSET, mid),
        ball=Ball(0.0, 0.0),
        ball_speed=clamp_setting(ball_speed),
        bot_difficulty=clamp_setting(bot_difficulty),
    )
    reset_ball(state.ball, state.ball_speed, fld, rng)
    return state


# -----------------------------
# Physics / collisions
# -----------------------------
def resolve_walls(ball: Ball, fld: Field) -> bool:
    """Bounce off the top/bottom edge. Returns True if the ball hit one."""
    hit = False
    if ball.y <= 0:
        ball.y = 0
        ball.vy *= -1
        hit = True
    if ball.y + fld.ball_size >= fld.height:
        ball.y = fld.height - fld.ball_size
        ball.vy *= -1
        hit = True
    return hit


def _overlaps_vertically(ball: Ball, paddle: Paddle, fld: Field):
    return ball.y + fld.ball_size >= paddle.y and ball.y <= paddle.y + paddle.height


def normalized_intersect(ball: Ball, paddle: Paddle, fld: Field):
    # +1 at the top edge of the paddle, -1 at the bottom
    rel = paddle.center_y - (ball.y + fld.ball_size / 2)
    return clamp(rel / (paddle.height / 2), -1.0, 1.0)


def resolve_left_paddle(ball: Ball, paddle: Paddle, speed, fld: Field) -> bool:
    if not (ball.x <= paddle.right_edge and _overlaps_vertically(ball, paddle, fld)):
        return False
    ball.x = paddle.right_edge
    ball.set_velocity(normalized_intersect(ball, paddle, fld) * MAX_BOUNCE, speed)
    if ball.vx < 0:
        ball.vx = abs(ball.vx)
    return True


def resolve_right_paddle(ball: Ball, paddle: Paddle, speed, fld: Field) -> bool:
    if not (ball.x + fld.ball_size >= paddle.x and _overlaps_vertically(ball, paddle, fld)):
        return False
    ball.x = paddle.x - fld.ball_size
    ball.set_velocity(math.pi - normalized_intersect(ball, paddle, fld) * MAX_BOUNCE, speed)
    if ball.vx > 0:
        ball.vx = -abs(ball.vx)
    return True


def out_of_bounds(ball: Ball, fld: Field) -> Optional[str]:
    """Side that scores, if the ball has left the field horizontally."""
    if ball.x < 0:
        return RIGHT
    if ball.x > fld.width:
        return LEFT
    return None


def advance(ball: Ball, left: Paddle, right: Paddle, speed, fld: Field) -> List[Event]:
    """
    One frame of ball motion: integrate, walls, paddles, then the out-of-bounds check.
    Scoring is only reported here; the caller awards the point and re-serves.
    """
    events = []
    ball.x += ball.vx
    ball.y += ball.vy

    if resolve_walls(ball, fld):
        events.append(Event(WALL))
    if resolve_left_paddle(ball, left, speed, fld):
        events.append(Event(PADDLE, side=LEFT))
    if resolve_right_paddle(ball, right, speed, fld):
        events.append(Event(PADDLE, side=RIGHT))

    scorer = out_of_bounds(ball, fld)
    if scorer is not None:
        events.append(Event(SCORE, side=scorer))
    return events


# -----------------------------
# Bot paddle
# -----------------------------
def move_ai_paddle(paddle: Paddle, ball: Ball, ai_speed, fld: Field):
    # fixed step toward the ball, may overshoot and jitter around the target
    target = ball.y + fld.ball_size / 2 - paddle.height / 2
    if target > paddle.y:
        paddle.y += ai_speed
    elif target < paddle.y:
        paddle.y -= ai_speed
    paddle.clamp_to(fld)


# -----------------------------
# Scoring & serve
# -----------------------------
def random_serve_angle(rng: np.random.Generator) -> float:
    angle = SERVE_MIN_ANGLE + rng.random() * (SERVE_MAX_ANGLE - SERVE_MIN_ANGLE)
    if rng.random() < 0.5:
        angle = -angle
    if rng.random() < 0.5:
        angle = math.pi - angle
    return angle


def reset_ball(ball: Ball, speed, fld: Field, rng: np.random.Generator):
    ball.x = fld.width / 2 - fld.ball_size / 2
    ball.y = fld.height / 2 - fld.ball_size / 2
    ball.set_velocity(random_serve_angle(rng), speed)


def award_point(state: SimState, side, rng: np.random.Generator):
    state.score.award(side)
    logger.info("Point %s: %d - %d", side, state.score.left, state.score.right)
    reset_ball(state.ball, state.ball_speed, state.playfield, rng)


# -----------------------------
# Intents (input, applied between ticks)
# -----------------------------
@dataclass
class MovePaddle:
    pointer_y: float


@dataclass
class TogglePause:
    pass


@dataclass
class SetBallSpeed:
    value: float


@dataclass
class SetBotDifficulty:
    value: float


def apply_intent(state: SimState, intent) -> Optional[Event]:
    if isinstance(intent, MovePaddle):
        state.left.y = intent.pointer_y - state.left.height / 2
        state.left.clamp_to(state.playfield)
        return None
    if isinstance(intent, TogglePause):
        state.paused = not state.paused
        return Event(PAUSE, value=state.paused)
    if isinstance(intent, SetBallSpeed):
        state.ball_speed = clamp_setting(intent.value)
        state.ball.rescale(state.ball_speed)
        logger.info("Ball speed set to %d", state.ball_speed)
        return Event(SETTING, key=BALL_SPEED_KEY, value=state.ball_speed)
    if isinstance(intent, SetBotDifficulty):
        state.bot_difficulty = clamp_setting(intent.value)
        logger.info("Bot difficulty set to %d", state.bot_difficulty)
        return Event(SETTING, key=BOT_DIFFICULTY_KEY, value=state.bot_difficulty)
    raise TypeError(f"unknown intent: {intent!r}")


# -----------------------------
# Game loop driver
# -----------------------------
class GameLoop:
    def __init__(self, state: SimState, rng: Optional[np.random.Generator] = None):
        self.state = state
        self.rng = rng if rng is not None else np.random.default_rng()
        self.intents = deque()
        self.listeners: List[Callable[[Event], None]] = []
        self.frames = 0

    @property
    def running(self):
        return not self.state.paused

    def post(self, intent):
        self.intents.append(intent)

    def subscribe(self, listener: Callable[[Event], None]):
        self.listeners.append(listener)

    def drain(self) -> List[Event]:
        events = []
        while self.intents:
            ev = apply_intent(self.state, self.intents.popleft())
            if ev is not None:
                events.append(ev)
        return events

    def update(self) -> List[Event]:
        if self.state.paused:
            return []
        s = self.state
        events = advance(s.ball, s.left, s.right, s.ball_speed, s.playfield)
        for ev in events:
            if ev.kind == SCORE:
                award_point(s, ev.side, self.rng)
        # AI reacts to the post-collision (or freshly served) ball
        move_ai_paddle(s.right, s.ball, s.bot_difficulty, s.playfield)
        return events

    def tick(self) -> List[Event]:
        events = self.drain()
        events += self.update()
        self.frames += 1
        for ev in events:
            for listener in self.listeners:
                listener(ev)
        return events

    def run(self, render: Callable[[SimState], None], next_frame: Callable[[], None],
            frames: Optional[int] = None):
        """tick -> render -> wait for the next frame, forever unless `frames` is given."""
        n = 0
        while frames is None or n < frames:
            self.tick()
            render(self.state)
            next_frame()
            n += 1
        logger.debug("Loop stopped after %d frames", n)
