import pytest

from pong_sim import BALL_SIZE, Ball, Field, Paddle, move_ai_paddle


def ball_targeting(y, fld, paddle_h=100):
    # ball placed so that the bot's target y equals `y`
    return Ball(400, y + paddle_h / 2 - fld.ball_size / 2)


def test_single_fixed_step_down(fld):
    paddle = Paddle(778, 50)
    move_ai_paddle(paddle, ball_targeting(80, fld), 4, fld)
    assert paddle.y == 54


def test_single_fixed_step_up(fld):
    paddle = Paddle(778, 200)
    move_ai_paddle(paddle, ball_targeting(120, fld), 7, fld)
    assert paddle.y == 193


def test_no_move_on_target(fld):
    paddle = Paddle(778, 150)
    move_ai_paddle(paddle, ball_targeting(150, fld), 9, fld)
    assert paddle.y == 150


def test_step_overshoots_target(fld):
    paddle = Paddle(778, 150)
    move_ai_paddle(paddle, ball_targeting(152, fld), 10, fld)
    assert paddle.y == 160
    # and comes back the next frame
    move_ai_paddle(paddle, ball_targeting(152, fld), 10, fld)
    assert paddle.y == 150


def test_clamped_at_top(fld):
    paddle = Paddle(778, 12)
    move_ai_paddle(paddle, Ball(400, 0), 10, fld)
    assert paddle.y == fld.margin


def test_clamped_at_bottom(fld):
    paddle = Paddle(778, fld.height - 100 - fld.margin - 1)
    move_ai_paddle(paddle, Ball(400, fld.height - BALL_SIZE), 10, fld)
    assert paddle.y == fld.height - 100 - fld.margin


@pytest.mark.parametrize("ai_speed", [1, 4, 10])
def test_bounds_hold_over_many_frames(fld, ai_speed):
    paddle = Paddle(778, 200)
    for y in list(range(-50, 600, 7)) + list(range(600, -50, -13)):
        move_ai_paddle(paddle, Ball(400, y), ai_speed, fld)
        assert fld.margin <= paddle.y <= fld.height - paddle.height - fld.margin


def test_uses_field_ball_size():
    fld = Field(ball_size=30)
    paddle = Paddle(778, 100)
    # centre of a 30px ball at y=150 means target == paddle.y
    move_ai_paddle(paddle, Ball(400, 135), 4, fld)
    assert paddle.y == 100
