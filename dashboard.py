# dashboard.py
import numpy as np
import streamlit as st

from pong_sim import (
    SETTING_MIN, SETTING_MAX, PADDLE_RADIUS,
    GameLoop, MovePaddle, TogglePause, SetBallSpeed, SetBotDifficulty,
    new_game, pause_hint,
)
from pong_settings import SettingsStore, load_preferences, persist_settings

BG = (25, 25, 30)
LINE = (70, 70, 80)
WHITE = (240, 240, 240)


# -----------------------------
# Rasterizer (numpy, no pygame)
# -----------------------------
def _fill_rounded(img, x, y, w, h, radius, color):
    H, W = img.shape[:2]
    x0, y0 = int(round(x)), int(round(y))
    x1, y1 = min(W, x0 + int(w)), min(H, y0 + int(h))
    x0, y0 = max(0, x0), max(0, y0)
    if x0 >= x1 or y0 >= y1:
        return
    yy, xx = np.ogrid[y0:y1, x0:x1]
    # distance from the rectangle shrunk by the corner radius
    cx = np.clip(xx, x + radius, x + w - radius)
    cy = np.clip(yy, y + radius, y + h - radius)
    mask = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius ** 2
    img[y0:y1, x0:x1][mask] = color


def render_rgb(state, scale=1):
    """RGB image of the court: paddles, ball and the dashed centre line."""
    fld = state.playfield
    W, H = int(fld.width), int(fld.height)
    img = np.zeros((H, W, 3), dtype=np.uint8)
    img[:] = BG
    for y in range(0, H, 30):  # center dashed line
        img[y:y+18, W//2-2:W//2+2] = LINE
    for p in (state.left, state.right):
        _fill_rounded(img, p.x, p.y, p.width, p.height, PADDLE_RADIUS, WHITE)
    size = fld.ball_size
    _fill_rounded(img, state.ball.x, state.ball.y, size, size, size / 2, WHITE)
    if scale != 1:
        img = np.repeat(np.repeat(img, scale, axis=0), scale, axis=1)
    return img


# -----------------------------
# Streamlit App
# -----------------------------
st.set_page_config(layout="wide", page_title="Pong")
st.title("Pong vs. Bot")

# Session boot
if "store" not in st.session_state:
    st.session_state.store = SettingsStore()
if "loop" not in st.session_state:
    ball_speed, bot_difficulty = load_preferences(st.session_state.store)
    rng = np.random.default_rng()
    loop = GameLoop(new_game(ball_speed, bot_difficulty, rng=rng), rng=rng)
    loop.subscribe(persist_settings(st.session_state.store))
    st.session_state.loop = loop

loop = st.session_state.loop
state = loop.state

# Sidebar controls
st.sidebar.header("Settings")
ball_speed = st.sidebar.slider("Ball Speed", SETTING_MIN, SETTING_MAX, value=state.ball_speed, step=1)
bot_difficulty = st.sidebar.slider("Bot Difficulty", SETTING_MIN, SETTING_MAX, value=state.bot_difficulty, step=1)
if ball_speed != state.ball_speed:
    loop.post(SetBallSpeed(ball_speed))
if bot_difficulty != state.bot_difficulty:
    loop.post(SetBotDifficulty(bot_difficulty))

st.sidebar.header("Player")
pointer_y = st.sidebar.slider("Left paddle (pointer y)", 0, int(state.playfield.height),
                              value=int(state.left.center_y), step=1)
if pointer_y != int(state.left.center_y):
    loop.post(MovePaddle(pointer_y))
if st.sidebar.button("⏯ Pause/Resume"):
    loop.post(TogglePause())
steps = st.sidebar.slider("Frames per refresh", 1, 60, 10, 1)

for _ in range(steps):
    loop.tick()

m1, m2, m3 = st.columns(3)
m1.metric("Player", f"{state.score.left}")
m2.metric("Bot", f"{state.score.right}")
m3.metric("Frame", f"{loop.frames}")

st.image(render_rgb(state), channels="RGB", caption=pause_hint(state.paused))
