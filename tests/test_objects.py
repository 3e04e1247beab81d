import math

import pytest

from tanktrouble.objects import (
    BLACK,
    MovingStatus,
    ObjectType,
    PosInfo,
    Shell,
    Tank,
)


def test_pos_info_validity():
    assert not PosInfo.invalid().is_valid()
    assert PosInfo().is_valid()


def test_tank_initial_state():
    tank = Tank(1, (100, 100), 90.0, (1.0, 0.0, 0.0))
    assert tank.type is ObjectType.TANK
    assert tank.remaining_shells == Tank.INITIAL_SHELLS
    assert tank.moving_status == MovingStatus.STATIONARY
    assert tank.position == PosInfo((100.0, 100.0), 90.0)


def test_forward_moves_one_default_step_along_heading():
    nxt = Tank.advance(PosInfo((100.0, 100.0), 0.0), MovingStatus.FORWARD, 0, 0)
    assert nxt.pos == pytest.approx((101.0, 100.0))
    assert nxt.angle == 0.0


def test_angle_ninety_points_up():
    nxt = Tank.advance(PosInfo((50.0, 50.0), 90.0), MovingStatus.FORWARD, 5, 0)
    assert nxt.pos[0] == pytest.approx(50.0)
    assert nxt.pos[1] < 50.0
    assert math.dist(nxt.pos, (50.0, 50.0)) == pytest.approx(5.0)


def test_forward_backward_round_trip():
    start = PosInfo((30.0, 40.0), 33.0)
    there = Tank.advance(start, MovingStatus.FORWARD, 4, 0)
    back = Tank.advance(there, MovingStatus.BACKWARD, 4, 0)
    assert back.pos == pytest.approx(start.pos)


@pytest.mark.parametrize("angle", [0.0, 45.0, 90.0, 359.0])
def test_rotation_round_trip(angle):
    start = PosInfo((0.0, 0.0), angle)
    turned = Tank.advance(start, MovingStatus.ROTATING_CW, 0, 0)
    assert turned.angle != angle
    back = Tank.advance(turned, MovingStatus.ROTATING_CCW, 0, 0)
    assert back.angle == angle


def test_clockwise_rotation_wraps():
    turned = Tank.advance(PosInfo((0.0, 0.0), 0.0), MovingStatus.ROTATING_CW, 0, 0)
    assert turned.angle == 357.0


def test_rotation_truncates_fraction():
    turned = Tank.advance(PosInfo((0.0, 0.0), 10.5), MovingStatus.ROTATING_CCW, 0, 0)
    assert turned.angle == 13.0


def test_direction_flags_are_exclusive():
    tank = Tank(1, (0, 0), 0.0, BLACK)
    tank.forward(True)
    tank.backward(True)
    assert tank.is_backwarding and not tank.is_forwarding
    tank.rotate_cw(True)
    tank.rotate_ccw(True)
    assert tank.is_rotating_ccw and not tank.is_rotating_cw
    tank.rotate_ccw(False)
    assert not tank.is_rotating_ccw


def test_stop_clears_movement():
    tank = Tank(1, (0, 0), 0.0, BLACK)
    tank.forward(True)
    tank.rotate_cw(True)
    tank.stop()
    assert tank.moving_status == MovingStatus.STATIONARY


def test_next_position_then_move():
    tank = Tank(1, (10.0, 10.0), 0.0, BLACK)
    tank.forward(True)
    nxt = tank.next_position(0, 0)
    assert tank.position.pos == (10.0, 10.0)
    tank.move_to_next_position()
    assert tank.position == nxt


def test_reset_next_position_overrides():
    tank = Tank(1, (10.0, 10.0), 0.0, BLACK)
    tank.forward(True)
    tank.next_position(0, 0)
    tank.reset_next_position(tank.position)
    tank.move_to_next_position()
    assert tank.position.pos == (10.0, 10.0)


def test_corners_centred_with_tank_dimensions():
    tank = Tank(1, (60.0, 70.0), 30.0, BLACK)
    corners = tank.corners()
    cx = sum(c[0] for c in corners) / 4
    cy = sum(c[1] for c in corners) / 4
    assert (cx, cy) == pytest.approx((60.0, 70.0))
    tl, tr, bl, _ = corners
    sides = sorted([math.dist(tl, tr), math.dist(tl, bl)])
    assert sides == pytest.approx([Tank.WIDTH, Tank.HEIGHT])


def test_corners_follow_movement():
    tank = Tank(1, (60.0, 70.0), 0.0, BLACK)
    before = tank.corners()
    tank.forward(True)
    tank.next_position(3, 0)
    tank.move_to_next_position()
    after = tank.corners()
    for a, b in zip(before, after):
        assert math.dist(a, b) == pytest.approx(3.0)


def test_make_shell():
    tank = Tank(7, (100.0, 100.0), 45.0, BLACK)
    shell = tank.make_shell(11)
    assert tank.remaining_shells == Tank.INITIAL_SHELLS - 1
    assert shell.id == 11
    assert shell.tank_id == 7
    assert shell.position.angle == 45.0
    assert math.dist(shell.position.pos, (100.0, 100.0)) == pytest.approx(Tank.MUZZLE_DISTANCE)
    tank.return_shell()
    assert tank.remaining_shells == Tank.INITIAL_SHELLS


def test_shell_state():
    shell = Shell(3, (5.0, 5.0), 180.0, 1)
    assert shell.type is ObjectType.SHELL
    assert shell.moving_status == MovingStatus.FORWARD
    assert shell.color == BLACK
    assert shell.ttl == Shell.INITIAL_TTL


def test_shell_count_down():
    shell = Shell(3, (5.0, 5.0), 180.0, 1)
    assert shell.count_down() == Shell.INITIAL_TTL
    assert shell.ttl == Shell.INITIAL_TTL - 1


def test_shell_advance_default_step():
    cur = PosInfo((20.0, 20.0), 120.0)
    nxt = Shell.advance(cur, 0)
    assert math.dist(nxt.pos, cur.pos) == pytest.approx(Shell.MOVING_STEP)
    assert nxt.angle == cur.angle


def test_shell_next_position_and_move():
    shell = Shell(3, (5.0, 5.0), 0.0, 1)
    nxt = shell.next_position(2, 0)
    shell.move_to_next_position()
    assert shell.position == nxt
    assert math.dist(nxt.pos, (5.0, 5.0)) == pytest.approx(2.0)