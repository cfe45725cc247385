"""Pearson correlation matrix across yearly care metrics.

Feeds the dashboard heatmap: rows and columns follow the metric order
the caller passes in, cells are coefficients in [-1, 1].

A metric that never changes (zero variance) has no defined correlation;
its cells, diagonal included, are reported as 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shelter_stats.errors import InvalidInputError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shelter_stats.datasources.care.models import YearlyRecord


@dataclass(frozen=True)
class CorrelationMatrix:
    """Square matrix of coefficients indexed by metric name on both axes."""

    metrics: tuple[str, ...]
    values: tuple[tuple[float, ...], ...]

    def index(self, metric: str) -> int:
        return self.metrics.index(metric)

    def cell(self, row: str, col: str) -> float:
        """Coefficient for a pair of metric names."""
        return self.values[self.index(row)][self.index(col)]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form: metric order plus the row-major matrix."""
        return {"metrics": list(self.metrics), "matrix": [list(row) for row in self.values]}


@dataclass(frozen=True)
class _Centered:
    """A metric's deviations from its mean, scaled to at most 1 in magnitude.

    Pearson's r doesn't change under scaling, and unit-sized deviations
    keep the sums of squares clear of overflow and underflow.
    """

    deviations: tuple[float, ...]
    sum_sq: float


def _center(values: list[float]) -> _Centered:
    if min(values) == max(values):
        return _Centered((0.0,) * len(values), 0.0)
    try:
        mean = math.fsum(values) / len(values)
    except OverflowError:
        mean = math.fsum(v / len(values) for v in values)
    deviations = [v - mean for v in values]
    if not all(math.isfinite(d) for d in deviations):
        msg = "Metric values span too wide a range to correlate"
        raise InvalidInputError(msg)
    scale = max((abs(d) for d in deviations), default=0.0)
    if scale > 0:
        deviations = [d / scale for d in deviations]
    return _Centered(tuple(deviations), math.fsum(d * d for d in deviations))


def _extract(records: Sequence[YearlyRecord], metric: str) -> list[float]:
    """Pull one metric out of every record, validating as we go."""
    values: list[float] = []
    for record in records:
        if metric not in record.metrics:
            msg = f"Metric {metric!r} missing from record for year {record.year}"
            raise InvalidInputError(msg)
        value = float(record.metrics[metric])
        if not math.isfinite(value):
            msg = f"Metric {metric!r} is not finite for year {record.year}: {value}"
            raise InvalidInputError(msg)
        values.append(value)
    return values


def _coefficient(a: _Centered, b: _Centered) -> float:
    if a.sum_sq == 0 or b.sum_sq == 0:
        return 0.0
    numerator = math.fsum(x * y for x, y in zip(a.deviations, b.deviations, strict=True))
    r = numerator / (math.sqrt(a.sum_sq) * math.sqrt(b.sum_sq))
    if not math.isfinite(r):
        msg = f"Correlation is not finite: {r}"
        raise InvalidInputError(msg)
    # Rounding can push |r| a hair past 1.
    return max(-1.0, min(1.0, r))


def pearson(a: Sequence[float], b: Sequence[float]) -> float:
    """Pearson coefficient of two equal-length series; 0 if either is constant."""
    if len(a) != len(b):
        msg = f"Series lengths differ: {len(a)} != {len(b)}"
        raise InvalidInputError(msg)
    if not a:
        msg = "Cannot correlate empty series"
        raise InvalidInputError(msg)
    return _coefficient(_center([float(v) for v in a]), _center([float(v) for v in b]))


def build_correlation_matrix(
    records: Sequence[YearlyRecord],
    metrics: Sequence[str],
) -> CorrelationMatrix:
    """
    Correlate every pair of ``metrics`` across ``records``.

    Each metric's series is extracted and centered once, then reused for
    every pair it takes part in. Only the upper triangle is computed; the
    lower one is mirrored, so the result is exactly symmetric.

    Args:
        records: Yearly records, one per year.
        metrics: Metric names; fixes the row/column order of the result.

    Returns:
        CorrelationMatrix with ``len(metrics)`` rows and columns.

    Raises:
        InvalidInputError: ``records`` is empty, or a record lacks a metric
            or holds a non-finite value for it.
    """
    if not records:
        msg = "Cannot build a correlation matrix from zero records"
        raise InvalidInputError(msg)

    names = tuple(metrics)
    centered = [_center(_extract(records, m)) for m in names]

    size = len(names)
    grid = [[0.0] * size for _ in range(size)]
    for i in range(size):
        for j in range(i, size):
            r = _coefficient(centered[i], centered[j])
            grid[i][j] = r
            grid[j][i] = r

    return CorrelationMatrix(metrics=names, values=tuple(tuple(row) for row in grid))
