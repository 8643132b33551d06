from __future__ import annotations

from typing import Iterable


def normalize_currency(value: str | None, fallback: str | None) -> str:
    code = (value or "").strip().upper()
    if code:
        return code
    fb = (fallback or "").strip().upper()
    return fb or "-"


def resolve_rate(*, allocation_rate: float | None, resource_rate: float | None) -> float:
    if allocation_rate is not None:
        return float(allocation_rate or 0.0)
    return float(resource_rate or 0.0)


def percentage(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator * 100.0


def is_mixed_currency(codes: Iterable[str]) -> bool:
    return len({c for c in codes if c and c != "-"}) > 1


__all__ = ["normalize_currency", "resolve_rate", "percentage", "is_mixed_currency"]
