"""Data transformation package."""

from stay_availability.transformers.interval_transformer import IntervalTransformer

__all__ = [
    "IntervalTransformer",
]
