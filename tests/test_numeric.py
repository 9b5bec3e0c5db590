import math

import pytest

from backend.numeric import BINARY_OPERATIONS, factorial, format_number, parse_number, unary_operations


@pytest.mark.parametrize("text, expected", [
    ("0", 0.0),
    ("53", 53.0),
    ("0.", 0.0),
    (".5", 0.5),
    ("-2.25", -2.25),
    ("1e3", 1000.0),
    ("3.2.1", 3.2),
    ("12)", 12.0),
    ("1e", 1.0),
    ("  7", 7.0),
    ("Infinity", math.inf),
    ("-Infinity", -math.inf),
])
def test_parse_number_takes_leading_number(text, expected):
    assert parse_number(text) == expected


@pytest.mark.parametrize("text", ["", "-", "π", "(", "NaN", "abc", "."])
def test_parse_number_without_number_is_nan(text):
    assert math.isnan(parse_number(text))


@pytest.mark.parametrize("value, expected", [
    (5.0, "5"),
    (-3.0, "-3"),
    (0.0, "0"),
    (-0.0, "0"),
    (2.5, "2.5"),
    (0.1 + 0.2, "0.30000000000000004"),
    (1e16, "10000000000000000"),
    (123456789012345680000.0, "123456789012345680000"),
    (1e21, "1e+21"),
    (1.5e300, "1.5e+300"),
    (0.000001, "0.000001"),
    (1e-7, "1e-7"),
    (-2.5e-8, "-2.5e-8"),
    (math.pi, "3.141592653589793"),
    (math.inf, "Infinity"),
    (-math.inf, "-Infinity"),
    (math.nan, "NaN"),
])
def test_format_number_matches_browser_output(value, expected):
    assert format_number(value) == expected


class TestBinaryOperations:
    def test_arithmetic(self):
        assert BINARY_OPERATIONS["+"](2, 3) == 5
        assert BINARY_OPERATIONS["-"](2, 3) == -1
        assert BINARY_OPERATIONS["×"](4, 2.5) == 10
        assert BINARY_OPERATIONS["÷"](9, 4) == 2.25
        assert BINARY_OPERATIONS["^"](2, 10) == 1024

    def test_division_by_zero_gives_sentinels(self):
        assert BINARY_OPERATIONS["÷"](5, 0) == math.inf
        assert BINARY_OPERATIONS["÷"](-5, 0) == -math.inf
        assert math.isnan(BINARY_OPERATIONS["÷"](0, 0))

    def test_overflow_is_infinity(self):
        assert BINARY_OPERATIONS["^"](10, 400) == math.inf

    def test_mod_keeps_sign_of_dividend(self):
        assert BINARY_OPERATIONS["mod"](7, 3) == 1
        assert BINARY_OPERATIONS["mod"](-7, 3) == -1
        assert math.isnan(BINARY_OPERATIONS["mod"](7, 0))

    def test_nan_propagates(self):
        assert math.isnan(BINARY_OPERATIONS["+"](math.nan, 1))


class TestUnaryOperations:
    def test_trig_in_radians_by_default(self):
        ops = unary_operations()
        assert ops["sin"](math.pi / 2) == pytest.approx(1.0)
        assert ops["cos"](0) == 1.0

    def test_trig_in_degrees(self):
        ops = unary_operations("deg")
        assert ops["sin"](30) == pytest.approx(0.5)
        assert ops["tan"](45) == pytest.approx(1.0)

    def test_logarithm_domain(self):
        ops = unary_operations()
        assert ops["log"](1000) == pytest.approx(3.0)
        assert ops["ln"](math.e) == pytest.approx(1.0)
        assert ops["log"](0) == -math.inf
        assert math.isnan(ops["ln"](-1))

    def test_sqrt_of_negative_is_nan(self):
        assert math.isnan(unary_operations()["sqrt"](-4))

    def test_constants_ignore_argument(self):
        ops = unary_operations()
        assert ops["pi"](42) == math.pi
        assert ops["e"](math.nan) == math.e

    def test_power_helpers(self):
        ops = unary_operations()
        assert ops["inv"](4) == 0.25
        assert ops["inv"](0) == math.inf
        assert ops["square"](-3) == 9
        assert ops["cube"](-2) == -8
        assert ops["10x"](3) == 1000
        assert ops["exp"](0) == 1


@pytest.mark.parametrize("value, expected", [(0, 1.0), (1, 1.0), (5, 120.0), (170, float(math.factorial(170)))])
def test_factorial(value, expected):
    assert factorial(value) == expected


def test_factorial_past_double_range_is_infinity():
    assert factorial(171) == math.inf


@pytest.mark.parametrize("value, expected", [(3.5, 6.0), (0.9, 1.0), (170.5, float(math.factorial(170)))])
def test_factorial_floors_non_integers(value, expected):
    assert factorial(value) == expected


@pytest.mark.parametrize("value", [-1, -3.5, -math.inf])
def test_factorial_of_negative_is_empty_product(value):
    assert factorial(value) == 1.0


def test_factorial_of_infinity_and_nan():
    assert factorial(math.inf) == math.inf
    assert math.isnan(factorial(math.nan))
