"""
Number handling for the calculator engine.

The display buffer is plain text, so every computation starts by parsing text
and ends by formatting a float back into text. Both directions follow the
browser conventions the calculator was designed around:

- parse_number behaves like JavaScript parseFloat (longest numeric prefix,
  "Infinity" accepted, anything else is NaN).
- format_number behaves like JavaScript Number#toString ("5" not "5.0",
  "Infinity", "NaN", exponent form outside 1e-7 .. 1e21).

Arithmetic runs on numpy float64 with floating point warnings silenced, so
division by zero, overflow and domain errors give IEEE-754 sentinels instead
of Python exceptions.
"""
import math
import re
from decimal import Decimal
from typing import Callable, Dict

import numpy as np

_NUMBER_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")

# Largest n whose factorial is still a finite double.
MAX_FACTORIAL = 170


def parse_number(text: str) -> float:
    """Parse the leading number in text; NaN when there is none."""
    match = _NUMBER_PREFIX.match(text or "")
    if not match:
        return math.nan
    return float(match.group(1).replace("Infinity", "inf"))


def format_number(value: float) -> str:
    """Render a float the way a browser would print it."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr() gives the shortest round-tripping digits; Decimal splits them out.
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k  # value == 0.<digits> * 10**n

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        body = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + body


def _ieee(fn: Callable[..., float]) -> Callable[..., float]:
    """Run fn on float64 arguments with numpy warnings silenced."""
    def wrapper(*args):
        with np.errstate(all="ignore"):
            return float(fn(*(np.float64(a) for a in args)))
    return wrapper


BINARY_OPERATIONS: Dict[str, Callable[[float, float], float]] = {
    "+": _ieee(np.add),
    "-": _ieee(np.subtract),
    "×": _ieee(np.multiply),
    "÷": _ieee(np.true_divide),
    "^": _ieee(np.power),
    "mod": _ieee(np.fmod),
}


def factorial(value: float) -> float:
    """
    Product of 1..floor(value). Negative input is the empty product (1), NaN stays
    NaN, and anything past MAX_FACTORIAL overflows to Infinity.
    """
    if math.isnan(value):
        return math.nan
    if value < 0:
        return 1.0
    n = math.inf if math.isinf(value) else math.floor(value)
    if n > MAX_FACTORIAL:
        return math.inf
    return float(math.factorial(n))


def _angle(fn: Callable, angle_mode: str) -> Callable[[float], float]:
    # deg mode converts the argument to radians first
    if angle_mode == "deg":
        return _ieee(lambda x: fn(np.radians(x)))
    return _ieee(fn)


def unary_operations(angle_mode: str = "rad") -> Dict[str, Callable[[float], float]]:
    """Functions applied immediately to the buffer value."""
    return {
        "sin": _angle(np.sin, angle_mode),
        "cos": _angle(np.cos, angle_mode),
        "tan": _angle(np.tan, angle_mode),
        "log": _ieee(np.log10),
        "ln": _ieee(np.log),
        "exp": _ieee(np.exp),
        "sqrt": _ieee(np.sqrt),
        "pi": lambda _: math.pi,
        "e": lambda _: math.e,
        "fact": factorial,
        "inv": _ieee(lambda x: np.true_divide(1.0, x)),
        "square": _ieee(np.square),
        "cube": _ieee(lambda x: np.power(x, 3)),
        "10x": _ieee(lambda x: np.power(10.0, x)),
    }
