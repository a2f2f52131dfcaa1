import math

import pytest

from geomaster.formatting import to_fixed
from geomaster.solver import (
    InvalidAngle,
    InvalidGeometry,
    Side,
    SolveError,
    evaluate,
    solve_right_triangle,
    solve_trig_ratios,
)


# --- PITAGORA ---

def test_hypotenuse_from_legs():
    res = solve_right_triangle(3, 4, None)
    assert res.unknown == "c"
    assert res.value == pytest.approx(5.0)
    assert (res.a, res.b, res.c) == (3.0, 4.0, res.value)
    assert [s.math for s in res.steps] == [
        "a = 3, b = 4",
        r"c = \sqrt{a^2 + b^2}",
        r"c = \sqrt{3^2 + 4^2}",
        r"c = \sqrt{9.00 + 16.00}",
        r"c = \sqrt{25.00}",
        r"c \approx 5.0000",
    ]
    assert res.steps[3].math.endswith("9.00 + 16.00}")


def test_leg_from_hypotenuse():
    res = solve_right_triangle(3, None, 5)
    assert res.unknown == "b"
    assert res.value == pytest.approx(4.0)
    assert res.b == res.value
    assert len(res.steps) == 4
    assert res.steps[1].math == r"b = \sqrt{c^2 - a^2}"
    assert res.steps[2].math == r"b = \sqrt{5^2 - 3^2}"
    assert res.steps[-1].math == r"b \approx 4.0000"


def test_other_leg_from_hypotenuse():
    res = solve_right_triangle(None, 12, 13)
    assert res.unknown == "a"
    assert res.a == pytest.approx(5.0)
    assert res.steps[0].math == "b = 12, c = 13"
    assert res.steps[1].math == r"a = \sqrt{c^2 - b^2}"
    assert res.steps[-1].math == r"a \approx 5.0000"


def test_decimal_inputs_echoed_as_typed():
    res = solve_right_triangle(1.5, 2, None)
    assert res.steps[0].math == "a = 1.5, b = 2"
    assert res.steps[3].math == r"c = \sqrt{2.25 + 4.00}"


@pytest.mark.parametrize("a,c", [(5, 5), (6, 5)])
def test_hypotenuse_not_longer_than_leg(a, c):
    with pytest.raises(InvalidGeometry):
        solve_right_triangle(a, None, c)
    with pytest.raises(InvalidGeometry):
        solve_right_triangle(None, a, c)


def test_negative_side_rejected():
    with pytest.raises(InvalidGeometry):
        solve_right_triangle(-3, 4)


def test_zero_legs():
    res = solve_right_triangle(0, 0)
    assert res.value == 0.0
    res = solve_right_triangle(0, None, 5)
    assert res.value == pytest.approx(5.0)


@pytest.mark.parametrize("args", [
    (None, None, None),
    (3, None, None),
    (None, None, 5),
    (3, 4, 5),
    (3, 4, 100),
    ("", "", ""),
    ("3", "4", None),
    (float("nan"), 4, None),
    (True, 4, None),
])
def test_insufficient_input_is_not_an_error(args):
    assert solve_right_triangle(*args) is None


@pytest.mark.parametrize("a,b", [(1, 1), (0.3, 7.25), (120.5, 0.001), (6, 8)])
def test_round_trip_through_hypotenuse(a, b):
    c = solve_right_triangle(a, b).value
    assert c == pytest.approx(math.sqrt(a * a + b * b))
    leg = solve_right_triangle(a, None, c).value
    assert solve_right_triangle(a, leg).value == pytest.approx(c, rel=1e-9)


def test_results_are_fresh_and_frozen():
    first = solve_right_triangle(3, 4)
    second = solve_right_triangle(3, 4)
    assert first == second
    assert first is not second
    with pytest.raises(AttributeError):
        first.value = 1


# --- TRIGONOMETRIA ---

def test_hypotenuse_known():
    res = solve_trig_ratios(30, Side.HYPOTENUSE, 10)
    assert res.a == pytest.approx(5.0)
    assert res.b == pytest.approx(8.660254, abs=1e-6)
    assert res.c == 10
    assert (res.sin, res.cos, res.tan) == pytest.approx((0.5, 0.8660254, 0.5773503), abs=1e-6)
    assert len(res.steps) == 3
    assert res.steps[0].math == r"c = 10, \alpha = 30^\circ"
    assert res.steps[1].math.endswith(r"\approx 5.0000")
    assert res.steps[2].math.endswith(r"\approx 8.6603")
    assert (to_fixed(res.sin, 4), to_fixed(res.cos, 4), to_fixed(res.tan, 4)) == ("0.5000", "0.8660", "0.5774")


def test_opposite_known():
    res = solve_trig_ratios(45, 'a', 1)
    assert res.c == pytest.approx(1.41421356)
    assert res.b == pytest.approx(1.0)
    assert res.steps[1].math == r"c = a / \sin(\alpha) = 1 / \sin(45^\circ) \approx 1.4142"
    assert res.steps[2].math == r"b = a / \tan(\alpha) = 1 / \tan(45^\circ) \approx 1.0000"


def test_adjacent_known():
    res = solve_trig_ratios(60, Side.ADJACENT, 2)
    assert res.c == pytest.approx(4.0)
    assert res.a == pytest.approx(2 * math.sqrt(3))
    assert res.steps[0].text.startswith("Dati cateto adiacente")


def test_ratios_consistent_with_sides():
    res = solve_trig_ratios(37.5, Side.ADJACENT, 7)
    assert res.sin == pytest.approx(res.a / res.c)
    assert res.cos == pytest.approx(res.b / res.c)
    assert res.tan == pytest.approx(res.a / res.b)
    assert res.c > res.a and res.c > res.b


@pytest.mark.parametrize("angle", [0.5, 10, 33.3, 45, 71, 89.5])
@pytest.mark.parametrize("value", [0.01, 1, 250])
def test_angle_recovered_from_arcsine(angle, value):
    res = solve_trig_ratios(angle, Side.HYPOTENUSE, value)
    assert math.degrees(math.asin(res.a / res.c)) == pytest.approx(angle, abs=1e-6)


@pytest.mark.parametrize("angle", [0, 90, -10, 120])
def test_angle_out_of_range(angle):
    with pytest.raises(InvalidAngle):
        solve_trig_ratios(angle, 'c', 5)


def test_non_positive_side_rejected():
    with pytest.raises(InvalidGeometry):
        solve_trig_ratios(30, 'c', 0)


def test_trig_absent_input():
    assert solve_trig_ratios(None, 'c', 5) is None
    assert solve_trig_ratios(30, 'c', None) is None
    assert solve_trig_ratios(float("nan"), 'c', 5) is None


def test_unknown_side_tag():
    with pytest.raises(ValueError) as exc:
        solve_trig_ratios(30, 'x', 5)
    assert not isinstance(exc.value, SolveError)


# --- VALORI ESTREMI ---

def test_huge_legs_keep_a_finite_hypotenuse():
    res = solve_right_triangle(1e200, 1e200)
    assert res.c == pytest.approx(math.sqrt(2) * 1e200)
    # a² non sta in un float: il procedimento lo mostra in forma esponenziale
    assert "e+" in res.steps[3].math and "e+" in res.steps[4].math
    assert res.steps[-1].math.startswith(r"c \approx 1.41421356")


def test_huge_hypotenuse_gives_finite_leg():
    res = solve_right_triangle(1e200, None, 2e200)
    assert res.unknown == "b"
    assert math.isfinite(res.b)
    assert res.b == pytest.approx(math.sqrt(3) * 1e200)


def test_tiny_legs_do_not_underflow_to_zero():
    res = solve_right_triangle(3e-200, 4e-200)
    assert res.c == pytest.approx(5e-200)
    res = solve_right_triangle(None, 3e-200, 5e-200)
    assert res.a == pytest.approx(4e-200)


@pytest.mark.parametrize("solver,args,error", [
    (solve_right_triangle, (1.5e308, 1.5e308), InvalidGeometry),
    (solve_trig_ratios, (1e-10, Side.OPPOSITE, 1e300), InvalidGeometry),
    (solve_trig_ratios, (89.9999999, Side.ADJACENT, 1e306), InvalidGeometry),
    (solve_trig_ratios, (30, Side.HYPOTENUSE, 5e-324), InvalidGeometry),
    (solve_trig_ratios, (5e-324, Side.OPPOSITE, 1), InvalidAngle),
    (solve_trig_ratios, (5e-324, Side.HYPOTENUSE, 1), InvalidAngle),
    (solve_trig_ratios, (5e-324, Side.ADJACENT, 1), InvalidAngle),
])
def test_unrepresentable_values_are_reported(solver, args, error):
    with pytest.raises(error) as exc:
        solver(*args)
    assert "intervallo rappresentabile" in str(exc.value)


@pytest.mark.parametrize("solver,args", [
    (solve_right_triangle, (1e200, 1e200)),
    (solve_right_triangle, (1e200, None, 2e200)),
    (solve_right_triangle, (1e-200, 1e-200)),
    (solve_right_triangle, (1.5e308, 1.5e308)),
    (solve_right_triangle, (1e308, None, 1.7e308)),
    (solve_trig_ratios, (1e-10, Side.OPPOSITE, 1e300)),
    (solve_trig_ratios, (1e-10, Side.HYPOTENUSE, 1e-300)),
    (solve_trig_ratios, (5e-324, Side.OPPOSITE, 1)),
    (solve_trig_ratios, (89.99999, Side.ADJACENT, 1e300)),
])
def test_extreme_values_never_escape_evaluate(solver, args):
    outcome = evaluate(solver, *args)
    assert outcome.status in ("ok", "error")
    if outcome.ok:
        res = outcome.result
        assert all(math.isfinite(s) for s in (res.a, res.b, res.c))
        assert all(step.text for step in res.steps)
    else:
        assert isinstance(outcome.error, SolveError)


# --- OUTCOME ---

def test_evaluate_folds_the_three_channels():
    ok = evaluate(solve_right_triangle, 3, 4)
    assert ok.ok and ok.result.value == pytest.approx(5.0)

    pending = evaluate(solve_right_triangle, 3)
    assert pending.status == "pending" and pending.result is None

    err = evaluate(solve_right_triangle, 5, None, 5)
    assert err.status == "error"
    assert isinstance(err.error, InvalidGeometry)
    assert err.message == "L'ipotenusa deve essere maggiore del cateto."

    err = evaluate(solve_trig_ratios, 90, 'c', 5)
    assert isinstance(err.error, InvalidAngle)
