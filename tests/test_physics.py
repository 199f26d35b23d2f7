import math

import pytest

from ballsim.data_models import Ball
from ballsim.physics import ForceLaw, compute_force


def magnitude(v):
    return math.hypot(v[0], v[1])


def test_force_at_distance_five():
    a = Ball((0.0, 0.0))
    b = Ball((3.0, 4.0))

    force = compute_force(a, [a, b])

    assert force == pytest.approx((0.096, 0.128))


def test_force_is_zero_inside_contact_distance():
    a = Ball((0.0, 0.0))
    b = Ball((0.0, 1.0))

    assert compute_force(a, [a, b]) == (0.0, 0.0)
    assert compute_force(b, [a, b]) == (0.0, 0.0)


def test_coincident_balls_do_not_blow_up():
    a = Ball((2.0, 2.0))
    b = Ball((2.0, 2.0))

    assert compute_force(a, [a, b]) == (0.0, 0.0)


def test_force_points_towards_other_ball():
    a = Ball((10.0, 10.0))
    b = Ball((20.0, 10.0))

    fx, fy = compute_force(a, [a, b])

    assert fx > 0.0
    assert fy == 0.0


def test_forces_are_equal_and_opposite():
    a = Ball((1.0, -2.0))
    b = Ball((7.5, 3.0))
    balls = [a, b]

    fa = compute_force(a, balls)
    fb = compute_force(b, balls)

    assert fa == pytest.approx((-fb[0], -fb[1]))


def test_force_decays_with_distance():
    target = Ball((0.0, 0.0))
    magnitudes = []
    for d in (2.5, 3.0, 5.0, 10.0, 50.0):
        other = Ball((d, 0.0))
        magnitudes.append(magnitude(compute_force(target, [target, other])))

    assert all(m > 0.0 for m in magnitudes)
    assert magnitudes == sorted(magnitudes, reverse=True)
    assert len(set(magnitudes)) == len(magnitudes)


def test_self_is_excluded():
    a = Ball((4.0, 4.0))

    assert compute_force(a, [a]) == (0.0, 0.0)
    assert compute_force(a, []) == (0.0, 0.0)


def test_contributions_add_up():
    target = Ball((0.0, 0.0))
    right = Ball((3.0, 4.0))
    left = Ball((-3.0, -4.0))

    # Symmetric neighbours cancel out
    assert compute_force(target, [target, right, left]) == pytest.approx((0.0, 0.0))

    above = Ball((0.0, 10.0))
    total = compute_force(target, [target, right, above])
    only_right = compute_force(target, [target, right])
    only_above = compute_force(target, [target, above])
    assert total == pytest.approx((only_right[0] + only_above[0], only_right[1] + only_above[1]))


def test_compute_force_does_not_mutate_balls():
    a = Ball((0.0, 0.0), velocity=(1.0, 1.0))
    b = Ball((3.0, 4.0))

    compute_force(a, [a, b])

    assert a.position == (0.0, 0.0)
    assert a.velocity == (1.0, 1.0)
    assert b.position == (3.0, 4.0)


def test_force_constant_scales_force():
    a = Ball((0.0, 0.0))
    b = Ball((3.0, 4.0))

    law = ForceLaw(force_constant=2.5)

    assert law.compute_force(a, [a, b]) == pytest.approx((0.24, 0.32))


def test_contact_distance_is_configurable():
    a = Ball((0.0, 0.0))
    b = Ball((3.0, 4.0))
    law = ForceLaw()

    law.set_contact_distance(6.0)
    assert law.compute_force(a, [a, b]) == (0.0, 0.0)

    law.set_contact_distance(-1.0)
    assert law.contact_distance == 0.0


def test_force_law_exposes_only_contact_distance_setter():
    law = ForceLaw(force_constant=3.0)

    assert law.force_constant == 3.0
    assert not hasattr(law, "set_force_constant")
