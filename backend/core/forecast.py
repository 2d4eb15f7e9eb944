"""
Short-horizon trend forecast.

The observed series is fitted with either a trailing moving average or
simple exponential smoothing. The forecast extends the last fitted value
flat over the horizon (no trend or seasonality term). Every fitted and
predicted point carries a symmetric band of ``band_k`` sample standard
deviations of the fit residuals.

Bad parameters raise InvalidParameterError; odd data (empty or very short
series) degrades to trivial output.
"""
import math
from datetime import date, timedelta
from typing import List, Optional, Sequence

from application.exceptions import InvalidParameterError
from domain.models import ForecastMethod, ForecastPoint, ForecastSeries

DEFAULT_WINDOW = 7
DEFAULT_ALPHA = 0.3
DEFAULT_BAND_K = 1.0


# =============================================================================
# Parameter checks
# =============================================================================


def _check_window(window: int) -> None:
    if window <= 0:
        raise InvalidParameterError(
            f"Moving-average window must be > 0, got {window}",
            details={"window": window},
        )


def _check_alpha(alpha: float) -> None:
    if not 0 < alpha < 1:
        raise InvalidParameterError(
            f"Smoothing factor must be in the open interval (0, 1), got {alpha}",
            details={"alpha": alpha},
        )


# =============================================================================
# Fitting
# =============================================================================


def _mean(values: Sequence[float]) -> float:
    """Mean taken as offsets from the first value, exact when all values are equal."""
    base = float(values[0])
    return base + math.fsum(v - base for v in values) / len(values)


def moving_average(series: Sequence[float], window: int = DEFAULT_WINDOW) -> List[float]:
    """
    Trailing moving average.

    The first ``window - 1`` points average over however many values exist
    so far, so the output is as long as the input. Each window is averaged
    on its own, so a constant window yields exactly that constant.
    """
    _check_window(window)
    return [
        _mean(series[max(0, i - window + 1):i + 1])
        for i in range(len(series))
    ]


def exponential_smoothing(series: Sequence[float], alpha: float = DEFAULT_ALPHA) -> List[float]:
    """Simple exponential smoothing seeded with the first observation."""
    _check_alpha(alpha)
    if not series:
        return []

    fitted = [float(series[0])]
    for value in series[1:]:
        previous = fitted[-1]
        fitted.append(previous + alpha * (value - previous))
    return fitted


def residual_std(actual: Sequence[float], fitted: Sequence[float]) -> float:
    """
    Sample standard deviation (n - 1) of ``actual - fitted``.

    Only the trailing overlap of the two sequences is used. Fewer than two
    residuals gives 0.
    """
    n = min(len(actual), len(fitted))
    if n < 2:
        return 0.0

    residuals = [a - f for a, f in zip(actual[-n:], fitted[-n:])]
    mean = sum(residuals) / n
    variance = sum((r - mean) ** 2 for r in residuals) / (n - 1)
    return math.sqrt(variance)


def build_horizon(last_date: date, horizon: int) -> List[date]:
    """The ``horizon`` consecutive days after ``last_date``."""
    return [last_date + timedelta(days=i) for i in range(1, horizon + 1)]


# =============================================================================
# Forecast
# =============================================================================


def forecast_series(
    dates: Sequence[date],
    series: Sequence[float],
    horizon: int,
    method: ForecastMethod = ForecastMethod.MOVING_AVERAGE,
    *,
    window: int = DEFAULT_WINDOW,
    alpha: float = DEFAULT_ALPHA,
    band_k: float = DEFAULT_BAND_K,
    start_after: Optional[date] = None,
) -> ForecastSeries:
    """
    Fit a daily series and extend it ``horizon`` days.

    Args:
        dates: Observation dates, oldest first, one per value
        series: Observed values
        horizon: Number of future days to predict
        method: Moving average or exponential smoothing
        window: Moving-average window
        alpha: Smoothing factor
        band_k: Band half-width in residual standard deviations
        start_after: First future day is the day after this (defaults to
            the last observed date)

    Returns:
        ForecastSeries; empty when the series is empty

    Raises:
        InvalidParameterError: window <= 0, alpha outside (0, 1), negative
            horizon or band_k, unknown method, or dates and series of
            different lengths
    """
    try:
        method = ForecastMethod(method)
    except ValueError:
        raise InvalidParameterError(
            f"Unknown forecast method: {method!r}",
            details={"method": str(method)},
        ) from None
    if method == ForecastMethod.MOVING_AVERAGE:
        _check_window(window)
    else:
        _check_alpha(alpha)
    if horizon < 0:
        raise InvalidParameterError(
            f"Horizon must be non-negative, got {horizon}",
            details={"horizon": horizon},
        )
    if band_k < 0:
        raise InvalidParameterError(
            f"Band multiplier must be non-negative, got {band_k}",
            details={"band_k": band_k},
        )
    if len(dates) != len(series):
        raise InvalidParameterError(
            "Dates and values must have the same length",
            details={"dates": len(dates), "values": len(series)},
        )

    if not series:
        return ForecastSeries(method=method)

    if method == ForecastMethod.MOVING_AVERAGE:
        fitted = moving_average(series, window)
    else:
        fitted = exponential_smoothing(series, alpha)

    sd = residual_std(series, fitted)
    half_width = band_k * sd

    history = [
        ForecastPoint(
            date=day,
            actual=actual,
            predicted=predicted,
            lower=predicted - half_width,
            upper=predicted + half_width,
        )
        for day, actual, predicted in zip(dates, series, fitted)
    ]

    last = fitted[-1]
    future = [
        ForecastPoint(date=day, predicted=last, lower=last - half_width, upper=last + half_width)
        for day in build_horizon(start_after or dates[-1], horizon)
    ]

    return ForecastSeries(method=method, history=history, future=future, residual_std=sd)
