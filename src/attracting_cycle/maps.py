"""Common holomorphic map families for experiments and the CLI."""

from __future__ import annotations

import cmath
from typing import Any, Callable, Protocol


class ComplexMap(Protocol):
    """A point map: accepts a point, returns a new point, may raise."""

    def __call__(self, z: Any) -> Any: ...


def quadratic(c: complex) -> ComplexMap:
    c = complex(c)

    def f(z):
        return z * z + c

    return f


def cubic(c: complex) -> ComplexMap:
    c = complex(c)

    def f(z):
        return z * z * z + c

    return f


def affine(c: complex, d: complex = 1.0) -> ComplexMap:
    """`z -> c*z + d`; attracting fixed point `d / (1 - c)` when |c| < 1."""

    c = complex(c)
    d = complex(d)

    def f(z):
        return c * z + d

    return f


def exponential(lam: complex) -> ComplexMap:
    lam = complex(lam)

    def f(z):
        return lam * cmath.exp(z)

    return f


def inversion(c: complex = 1.0) -> ComplexMap:
    """`z -> c / z`. Every orbit off the fixed points is an exact 2-cycle."""

    c = complex(c)

    def f(z):
        return c / z

    return f


def newton(n: int) -> ComplexMap:
    """Newton's method for `z**n - 1`; the roots of unity are superattracting."""

    n = int(n)
    if n < 2:
        raise ValueError("n must be >= 2")

    def f(z):
        return z - (z**n - 1) / (n * z ** (n - 1))

    return f


def newton_family(n: complex) -> ComplexMap:
    """`newton` taking the degree as a family parameter (real part, rounded)."""

    return newton(int(round(complex(n).real)))


FAMILIES: dict[str, Callable[[complex], ComplexMap]] = {
    "quadratic": quadratic,
    "cubic": cubic,
    "affine": affine,
    "exponential": exponential,
    "inversion": inversion,
    "newton": newton_family,
}


def get_family(name: str) -> Callable[[complex], ComplexMap]:
    key = str(name).strip().lower()
    if key not in FAMILIES:
        raise KeyError(f"unknown map family {name!r}; expected one of: {', '.join(sorted(FAMILIES))}")
    return FAMILIES[key]
