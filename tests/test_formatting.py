from decimal import Decimal

import pytest

from geomaster.formatting import (
    clean_latex_for_text,
    format_number,
    parse_number,
    steps_to_text,
    to_fixed,
)
from geomaster.solver import Step, solve_right_triangle, solve_trig_ratios


@pytest.mark.parametrize("val,digits,expected", [
    (5.0, 4, "5.0000"),
    (8.660254037844387, 4, "8.6603"),
    (0.5773502691896257, 4, "0.5774"),
    (9, 2, "9.00"),
    (0.125, 2, "0.13"),     # metà esatta: verso l'alto come toFixed
    (2.675, 2, "2.67"),     # 2.675 in binario è 2.67499999...
    (-0.0001, 2, "0.00"),
    (3.14159, 1, "3.1"),
    (1e20, 2, "100000000000000000000.00"),   # oltre la precisione decimale di default
    (1e21, 4, "1e+21"),                      # come toFixed: forma esponenziale
    (1.5e200, 4, "1.5e+200"),
    (Decimal("1E+400"), 2, "1e+400"),
])
def test_to_fixed(val, digits, expected):
    assert to_fixed(val, digits) == expected


@pytest.mark.parametrize("val", [float("inf"), float("-inf"), float("nan")])
def test_to_fixed_rejects_non_finite(val):
    with pytest.raises(ValueError):
        to_fixed(val, 2)


@pytest.mark.parametrize("val,expected", [
    (3, "3"), (3.0, "3"), (2.5, "2.5"), (0.1, "0.1"), (-4.0, "-4"), (0, "0"),
    (1e-05, "0.00001"), (0.000001, "0.000001"), (1e-07, "1e-7"), (2.5e-08, "2.5e-8"),
    (1e20, "100000000000000000000"), (1e21, "1e+21"), (-1.5e300, "-1.5e+300"),
])
def test_format_number(val, expected):
    assert format_number(val) == expected


@pytest.mark.parametrize("raw,expected", [
    ("3", 3.0),
    (" 2.5 ", 2.5),
    ("2,5", 2.5),
    ("-1", -1.0),
    (7, 7.0),
    ("", None),
    ("   ", None),
    (None, None),
    ("abc", None),
    ("3cm", None),
    ("nan", None),
    ("inf", None),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_clean_latex_for_text():
    assert clean_latex_for_text(r"c = \sqrt{3^2 + 4^2}") == "c = √(3² + 4²)"
    assert clean_latex_for_text(r"c \approx 5.0000") == "c ≈ 5.0000"
    assert clean_latex_for_text(
        r"a = c \cdot \sin(\alpha) = 10 \cdot \sin(30^\circ) \approx 5.0000"
    ) == "a = c × sin(α) = 10 × sin(30°) ≈ 5.0000"


def test_steps_to_text_pythagoras():
    text = steps_to_text(solve_right_triangle(3, 4).steps)
    lines = text.split("\n")
    assert len(lines) == 6
    assert lines[0] == "Identifichiamo i cateti: a = 3, b = 4"
    assert lines[3] == "Calcoliamo i quadrati: c = √(9.00 + 16.00)"
    assert lines[-1] == "Risultato finale: c ≈ 5.0000"


def test_steps_to_text_trig():
    text = steps_to_text(solve_trig_ratios(30, "c", 10).steps)
    assert text.splitlines()[0] == "Dati ipotenusa (c) e angolo (α): c = 10, α = 30°"


def test_step_without_math():
    assert steps_to_text([Step("Solo testo")]) == "Solo testo"
