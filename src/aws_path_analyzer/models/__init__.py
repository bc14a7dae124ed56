"""Pydantic models for the path analyzer."""

from .base import RoutingTarget, TrafficSpec, normalize_protocol
from .rules import RuleEvaluation, EvaluationResult

__all__ = [
    "RoutingTarget",
    "TrafficSpec",
    "normalize_protocol",
    "RuleEvaluation",
    "EvaluationResult",
]
