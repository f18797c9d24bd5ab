"""Core requisition and candidate-matching components."""

from __future__ import annotations

from .approval import ApprovalChainEngine
from .delegation import DelegationResolver
from .fulfillment import SlotFulfillmentTracker
from .geo import GeoAssessment, GeoConfig, GeoMatchEngine, StoreMatch, format_distance
from .routing import ApplicationRouter, ScreeningResult, decide_flow, evaluate_screening

__all__ = [
    "ApplicationRouter",
    "ApprovalChainEngine",
    "DelegationResolver",
    "GeoAssessment",
    "GeoConfig",
    "GeoMatchEngine",
    "ScreeningResult",
    "SlotFulfillmentTracker",
    "StoreMatch",
    "decide_flow",
    "evaluate_screening",
    "format_distance",
]
