"""
Google Places Enricher

Resolves one business record to a place and pulls its address, phone and
website. Two sequential calls: autocomplete for the best-ranked candidate,
then place details for that candidate.
"""
from core.logging import get_logger

from .models import BusinessRecord, EnrichedFields, SessionToken

logger = get_logger(__name__, domain="d4")


class PlacesEnricher:
    """
    Stateless per-record enricher

    No retries, no caching of identical queries. Errors from the gateway
    propagate to the caller.
    """

    def __init__(self, places_client, query_separator: str = ""):
        self.places = places_client
        self.query_separator = query_separator

    def build_query(self, record: BusinessRecord) -> str:
        # The default empty separator yields e.g. "Acme BakerySpringfieldON"
        return self.query_separator.join([record.name, record.city, record.region])

    async def enrich(self, record: BusinessRecord, session_token: SessionToken) -> EnrichedFields:
        """Look up a record and return the fields to write onto it"""
        query = self.build_query(record)

        candidates = await self.places.resolve_candidates(query, session_token)
        if not candidates:
            logger.debug(f"No candidates for '{query}'")
            return EnrichedFields.empty()

        place_id = candidates[0]
        details = await self.places.fetch_details(place_id)

        return EnrichedFields(
            place_id=place_id,
            address=details.get("formatted_address", ""),
            phone=details.get("international_phone_number", ""),
            website=details.get("website", ""),
        )
