"""
Restricted angle grammar for parametric gates.

Angles arrive from the canvas (and from generated circuits) as short
strings. Only a closed set of forms is understood:

    angle := number
           | [sign] [coeff ['*']] 'pi' [('/' | '*') number]

so ``"0.5"``, ``"-pi"``, ``"pi/2"``, ``"3pi/4"``, ``"-0.5*pi"`` and
``"pi*2"`` are accepted while ``"sin(pi)"`` or ``"pi/2/2"`` are not.
``π`` is accepted as a spelling of ``pi``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, Union

from qcanvas.exceptions import InvalidAngleExpression

_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)(?:e[+-]?\d+)?"
_NUMBER_RE = re.compile(rf"^[+-]?{_NUMBER}$")
_PI_RE = re.compile(
    rf"^(?P<sign>[+-]?)(?:(?P<coeff>{_NUMBER})\*?)?pi"
    rf"(?:(?P<op>[/*])(?P<operand>{_NUMBER}))?$"
)


@dataclass(frozen=True)
class Angle:
    """
    Resolved angle

    Attributes
    ----------
    expression: str
        The normalized source expression
    radians: float
        Angle value in radians
    pi_multiple: Optional[float]
        For symbolic angles the multiple of pi, None for plain numbers
    """

    expression: str
    radians: float
    pi_multiple: Optional[float] = None

    @property
    def is_symbolic(self) -> bool:
        return self.pi_multiple is not None

    def __float__(self) -> float:
        return self.radians


ZERO = Angle("0", 0.0)


def parse_angle(expression: Union[str, int, float, Angle, None]) -> Angle:
    """
    Resolve an angle expression

    Parameters
    ----------
    expression: Union[str, int, float, Angle, None]
        Angle source; missing or empty expressions resolve to zero

    Returns
    -------
    Angle
        The resolved angle

    Raises
    ------
    InvalidAngleExpression
        If the expression does not belong to the grammar or overflows to
        a non finite angle
    """
    if isinstance(expression, Angle):
        return expression
    if expression is None:
        return ZERO
    if isinstance(expression, bool):
        raise InvalidAngleExpression(expression)
    if isinstance(expression, (int, float)):
        if not math.isfinite(expression):
            raise InvalidAngleExpression(expression)
        return Angle(repr(expression), float(expression))
    if not isinstance(expression, str):
        raise InvalidAngleExpression(expression)

    clean = re.sub(r"\s+", "", expression).lower().replace("π", "pi")
    if clean == "":
        return ZERO

    if _NUMBER_RE.match(clean):
        value = float(clean)
        if not math.isfinite(value):
            raise InvalidAngleExpression(expression)
        return Angle(clean, value)

    match = _PI_RE.match(clean)
    if match is None:
        raise InvalidAngleExpression(expression)

    multiple = float(match.group("coeff")) if match.group("coeff") else 1.0
    if match.group("sign") == "-":
        multiple = -multiple
    if match.group("op") == "/":
        divisor = float(match.group("operand"))
        if divisor == 0:
            raise InvalidAngleExpression(expression)
        multiple /= divisor
    elif match.group("op") == "*":
        multiple *= float(match.group("operand"))

    radians = multiple * math.pi
    if not math.isfinite(radians):
        raise InvalidAngleExpression(expression)
    return Angle(clean, radians, multiple)
