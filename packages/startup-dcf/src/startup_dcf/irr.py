"""
Return Metrics
==============

IRR, MIRR and payback periods for a cash-flow series indexed by period
(``cash_flows[0]`` is period 0, typically the negative investment).

The IRR solver runs in two phases:

1. Newton-Raphson from ``INITIAL_GUESS``, clamping the rate to
   ``[RATE_LOWER_BOUND, RATE_UPPER_BOUND]`` after every step.
2. Bisection over the same bounds when Newton hits a flat derivative,
   steps to a rate where the NPV leaves float range, or exhausts its
   iteration budget.

A series without a sign change has no guaranteed real root; that outcome is
reported as ``IRRResult(irr=nan, converged=False)`` rather than raised.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import InputError

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-10
INITIAL_GUESS = 0.10
RATE_LOWER_BOUND = -0.99
RATE_UPPER_BOUND = 10.0
DERIVATIVE_EPSILON = 1e-15


@dataclass(frozen=True)
class IRRResult:
    irr: float
    converged: bool
    iterations: int


class IRRPhase(enum.Enum):
    NEWTON = "newton"
    BISECTION = "bisection"
    DONE = "done"


NOT_CONVERGED = IRRResult(irr=float("nan"), converged=False, iterations=0)


def _discounted(cf: float, rate: float, periods: int) -> float:
    """
    ``cf / (1 + rate) ** periods``, saturating instead of raising when the
    discount factor leaves float range on long series near the rate bounds.
    """
    if cf == 0:
        return 0.0
    try:
        return cf / (1.0 + rate) ** periods
    except ZeroDivisionError:
        return math.copysign(math.inf, cf)
    except OverflowError:
        return 0.0


def npv_at_rate(cash_flows: Sequence[float], rate: float) -> float:
    return sum(_discounted(cf, rate, t) for t, cf in enumerate(cash_flows))


def npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    # d(NPV)/dr = sum_{t>=1} -t * CF_t / (1 + r)^(t + 1)
    return sum(-t * _discounted(cf, rate, t + 1) for t, cf in enumerate(cash_flows) if t > 0)


def _clamp_rate(rate: float) -> float:
    return min(max(rate, RATE_LOWER_BOUND), RATE_UPPER_BOUND)


def newton_raphson_irr(cash_flows: Sequence[float], initial_guess: float = INITIAL_GUESS) -> Optional[IRRResult]:
    """
    Phase 1. Returns the converged result, or ``None`` when the caller should
    fall back to bisection (NPV out of float range, flat derivative, or
    iteration budget exhausted).
    """
    rate = initial_guess
    for iteration in range(MAX_ITERATIONS):
        npv = npv_at_rate(cash_flows, rate)
        if not math.isfinite(npv):
            logger.debug("NPV out of float range at rate %s after %d iterations", rate, iteration)
            return None
        if abs(npv) < TOLERANCE:
            return IRRResult(irr=rate, converged=True, iterations=iteration + 1)

        derivative = npv_derivative(cash_flows, rate)
        if not math.isfinite(derivative) or abs(derivative) < DERIVATIVE_EPSILON:
            logger.debug("Flat NPV derivative at rate %s after %d iterations", rate, iteration)
            return None

        rate = _clamp_rate(rate - npv / derivative)

    logger.debug("Newton-Raphson did not converge within %d iterations", MAX_ITERATIONS)
    return None


def bisection_irr(
    cash_flows: Sequence[float],
    low: float = RATE_LOWER_BOUND,
    high: float = RATE_UPPER_BOUND,
) -> IRRResult:
    """Phase 2. Requires NPV to change sign between ``low`` and ``high``."""
    npv_low = npv_at_rate(cash_flows, low)
    npv_high = npv_at_rate(cash_flows, high)

    if math.isnan(npv_low) or math.isnan(npv_high) or npv_low * npv_high > 0:
        logger.warning("IRR bisection bracket [%s, %s] shows no sign change", low, high)
        return NOT_CONVERGED

    for iteration in range(MAX_ITERATIONS):
        mid = (low + high) / 2.0
        npv_mid = npv_at_rate(cash_flows, mid)

        if abs(npv_mid) < TOLERANCE or (high - low) / 2.0 < TOLERANCE:
            return IRRResult(irr=mid, converged=True, iterations=iteration + 1)

        if npv_mid * npv_low < 0:
            high = mid
        else:
            low = mid
            npv_low = npv_mid

    return IRRResult(irr=(low + high) / 2.0, converged=False, iterations=MAX_ITERATIONS)


def calculate_irr(cash_flows: Sequence[float], initial_guess: float = INITIAL_GUESS) -> IRRResult:
    """
    Rate at which the NPV of ``cash_flows`` is zero.

    >>> round(calculate_irr([-1000, 400, 400, 400, 400]).irr, 4)
    0.2186
    """
    if len(cash_flows) < 2:
        raise InputError("At least 2 cash flows required to calculate IRR")

    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)
    if not (has_positive and has_negative):
        return NOT_CONVERGED

    phase = IRRPhase.NEWTON
    result: Optional[IRRResult] = None
    while phase is not IRRPhase.DONE:
        if phase is IRRPhase.NEWTON:
            result = newton_raphson_irr(cash_flows, initial_guess)
            phase = IRRPhase.DONE if result is not None else IRRPhase.BISECTION
        else:
            result = bisection_irr(cash_flows)
            phase = IRRPhase.DONE

    return result


def calculate_mirr(cash_flows: Sequence[float], finance_rate: float, reinvest_rate: float) -> float:
    """
    Modified IRR: negative flows discounted to period 0 at ``finance_rate``,
    positive flows compounded to the final period at ``reinvest_rate``.

        MIRR = (FV_positive / |PV_negative|)^(1/n) - 1
    """
    if len(cash_flows) < 2:
        raise InputError("At least 2 cash flows required to calculate MIRR")

    n = len(cash_flows) - 1
    pv_negative = 0.0
    fv_positive = 0.0
    for t, cf in enumerate(cash_flows):
        if cf < 0:
            pv_negative += cf / (1.0 + finance_rate) ** t
        else:
            fv_positive += cf * (1.0 + reinvest_rate) ** (n - t)

    if pv_negative >= 0:
        raise InputError("No negative cash flows found")

    return (fv_positive / abs(pv_negative)) ** (1.0 / n) - 1.0


def calculate_payback_period(cash_flows: Sequence[float]) -> Optional[float]:
    """Years until cumulative cash flow turns non-negative, interpolated within the crossing year."""
    return _payback(list(cash_flows))


def calculate_discounted_payback_period(cash_flows: Sequence[float], discount_rate: float) -> Optional[float]:
    return _payback([cf / (1.0 + discount_rate) ** t for t, cf in enumerate(cash_flows)])


def _payback(flows: List[float]) -> Optional[float]:
    cumulative = 0.0
    for t, cf in enumerate(flows):
        previous = cumulative
        cumulative += cf
        if previous < 0 <= cumulative:
            if cf != 0:
                return (t - 1) + (-previous / cf)
            return float(t)
    return None
