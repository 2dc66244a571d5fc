"""
D11 Orchestration Domain

Runs the transform pipeline for uploaded datasets: download, parse, enrich,
serialize, upload. The Lambda handler is the trigger boundary.
"""

from .handler import handler, locations_from_event
from .pipeline import TransformPipeline, output_location_for

__all__ = [
    "TransformPipeline",
    "handler",
    "locations_from_event",
    "output_location_for",
]
