"""Aggregate stage: per-event-type health and economic impact tables."""

from stormimpact.aggregate.economic import aggregate_economy, normalize_damage
from stormimpact.aggregate.health import aggregate_health

__all__ = ["aggregate_economy", "aggregate_health", "normalize_damage"]
