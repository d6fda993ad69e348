"""Parse user-typed numbers for widget text fields."""

from __future__ import annotations

import math
from typing import Any

import sympy as sp


def parse_real(obj: Any) -> float:
    """
    Convert `obj` to a finite real float.

    Accepted inputs:
    - real numbers (``bool`` excluded),
    - numeric strings (``"7.5"``),
    - SymPy-parsable expressions that evaluate to a real number
      (``"15/2"``, ``"2*pi"``, ``"sqrt(20)"``).

    Raises
    ------
    ValueError
        If the value is empty, not real, not finite, or cannot be parsed.
    """
    if isinstance(obj, bool):
        raise ValueError(f"Could not convert {obj!r} to a real number.")

    if isinstance(obj, (int, float)):
        value = float(obj)
    elif isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError("Cannot convert empty string to a real number.")
        try:
            value = float(s)
        except ValueError:
            value = _evaluate_expression(s)
    else:
        raise ValueError(f"Could not convert {obj!r} to a real number.")

    if not math.isfinite(value):
        raise ValueError(f"Expected a finite number, got {obj!r}.")
    return value


def _evaluate_expression(text: str) -> float:
    try:
        expr = sp.sympify(text)
        number = complex(expr.evalf())
    except (sp.SympifyError, TypeError, ValueError, SyntaxError) as e:
        raise ValueError(f"Could not parse {text!r} as a number.") from e
    if number.imag != 0:
        raise ValueError(f"{text!r} is not a real number.")
    return number.real


__all__ = ["parse_real"]
