"""
D4 Enrichment Domain

Resolves business records against Google Places and fills in address,
phone and website.

Components:
- Models: Business records and enrichment values
- Places enricher: Per-record autocomplete + details lookup
- Coordinator: Concurrent fan-out/fan-in across a dataset
"""

from .coordinator import BatchEnrichmentResult, EnrichmentCoordinator
from .models import BusinessRecord, EnrichedFields, EnrichmentOutcome, EnrichmentStatus, SessionToken
from .places_enricher import PlacesEnricher

__all__ = [
    "BatchEnrichmentResult",
    "BusinessRecord",
    "EnrichedFields",
    "EnrichmentCoordinator",
    "EnrichmentOutcome",
    "EnrichmentStatus",
    "PlacesEnricher",
    "SessionToken",
]
