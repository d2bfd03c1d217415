"""Pure-Decimal exponential and logarithm for discounting.

Both functions use MEASURA_DECIMAL_CONTEXT (prec=28, ROUND_HALF_EVEN) for
their output and compute internally with guard digits.

exp_d : Decimal -> Decimal   (Taylor series with range reduction)
ln_d  : Decimal -> Decimal   (range reduction + atanh series; ValueError on non-positive)
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from measura.core.money import MEASURA_DECIMAL_CONTEXT

_GUARD_DIGITS = 10
_INTERNAL_PREC = MEASURA_DECIMAL_CONTEXT.prec + _GUARD_DIGITS  # 38

_ZERO = Decimal("0")
_ONE = Decimal("1")
_TWO = Decimal("2")
_HALF = Decimal("0.5")


def _to_output(value: Decimal) -> Decimal:
    """Round an internal-precision Decimal back to MEASURA_DECIMAL_CONTEXT precision."""
    with localcontext(MEASURA_DECIMAL_CONTEXT):
        return value + _ZERO  # forces rounding to prec=28


def _atanh_series(u: Decimal, prec: int) -> Decimal:
    """atanh(u) = u + u^3/3 + u^5/5 + ... for |u| < 1."""
    u_sq = u * u
    term = u
    total = u
    eps = Decimal(10) ** (-(prec + 2))
    for k in range(1, 300):
        term = term * u_sq
        contrib = term / Decimal(2 * k + 1)
        total = total + contrib
        if abs(contrib) < eps:
            break
    return total


def _ln2_const(prec: int) -> Decimal:
    """ln(2) = 2 * atanh(1/3)."""
    with localcontext(MEASURA_DECIMAL_CONTEXT) as ctx:
        ctx.prec = prec + 5
        return _atanh_series(_ONE / Decimal(3), ctx.prec) * _TWO


def exp_d(x: Decimal) -> Decimal:
    """Compute exp(x) for arbitrary Decimal x.

    Range reduction writes x = k * ln2 + r with |r| <= ln2/2, so that
    exp(x) = 2^k * exp(r) and the Taylor series for exp(r) converges fast.
    """
    if x == _ZERO:
        return _ONE
    with localcontext(MEASURA_DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        ln2 = _ln2_const(ctx.prec)
        k = int((x / ln2).to_integral_value())
        r = x - Decimal(k) * ln2

        exp_r = _ONE
        term = _ONE
        eps = Decimal(10) ** (-(ctx.prec + 2))
        for n in range(1, 200):
            term = term * r / Decimal(n)
            exp_r = exp_r + term
            if abs(term) < eps:
                break

        result = exp_r * (_TWO ** k) if k >= 0 else exp_r / (_TWO ** (-k))
        return _to_output(result)


def ln_d(x: Decimal) -> Decimal:
    """Compute ln(x) for positive Decimal x.

    Raises ValueError if x <= 0. Range reduction brings x into [0.5, 2)
    by powers of two, then ln(m) = 2 * atanh((m - 1) / (m + 1)).
    """
    if x <= _ZERO:
        raise ValueError(f"ln_d requires x > 0, got {x}")
    if x == _ONE:
        return _ZERO
    with localcontext(MEASURA_DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        val = x + _ZERO
        e = 0
        while val >= _TWO:
            val = val / _TWO
            e += 1
        while val < _HALF:
            val = val * _TWO
            e -= 1
        ln_val = _atanh_series((val - _ONE) / (val + _ONE), ctx.prec) * _TWO
        return _to_output(ln_val + Decimal(e) * _ln2_const(ctx.prec))
