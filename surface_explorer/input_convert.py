# === SECTION: InputConvert [id: InputConvert]===
"""Coercion of raw widget/event values into numbers and axis indices."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
import sympy as sp


def InputConvert(obj: Any) -> float:
    """
    Convert `obj` to ``float``.

    Rules:
    - Numbers (including NumPy scalars) are cast directly.
    - Strings are tried as plain floats first, then parsed as a SymPy
      expression and evaluated (so ``"8/2"`` or ``"sqrt(9)"`` work in the
      slider text field).
    - Complex results keep only their real part.

    Raises
    ------
    ValueError
        If conversion fails.
    """
    # Fast path: numeric types (exclude bool)
    if isinstance(obj, (int, float, np.integer, np.floating)) and not isinstance(obj, (bool, np.bool_)):
        try:
            return float(obj)
        except OverflowError as e:
            raise ValueError(f"Could not convert {obj!r} to float.") from e

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError("Cannot convert empty string to float.")

        try:
            return float(s)
        except ValueError:
            pass

        try:
            expr = sp.sympify(s)
            return complex(expr.evalf()).real
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to float (neither directly nor via SymPy)."
            ) from e

    raise ValueError(f"Could not convert {obj!r} to float.")


def resolve_axis_position(text: Any, labels: Sequence[str]) -> float:
    """Resolve user text to a (possibly fractional) index on an axis.

    An exact label match wins over numeric interpretation, so typing ``"100"``
    on the strike axis selects the ``"100"`` strike rather than index 100.
    Anything else goes through :func:`InputConvert`; range clamping is left to
    the selection normalizer.

    Raises
    ------
    ValueError
        If *text* is neither a label nor a numeric expression.
    """
    if isinstance(text, str):
        key = text.strip()
        if key in labels:
            return float(list(labels).index(key))
    return InputConvert(text)

# === END OF SECTION: InputConvert [id: InputConvert]===
