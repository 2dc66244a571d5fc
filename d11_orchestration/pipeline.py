"""
D11 Orchestration Pipeline

Drives one transform run: download the uploaded CSV, parse it, enrich every
row against Google Places, serialize, and upload the result to the output
bucket under "output-<key>".

The output bucket is never the trigger bucket. Settings validation rejects
equal buckets, and run() refuses an input location in the output bucket
before doing any I/O.
"""

import asyncio
from typing import Optional, Tuple

from core.config import Settings
from core.exceptions import RecursiveTriggerError
from core.logging import get_logger
from d0_gateway.providers.google_places import GooglePlacesClient
from d0_gateway.storage import S3ObjectStore, StorageLocation
from d2_sourcing import csv_codec
from d4_enrichment.coordinator import BatchEnrichmentResult, EnrichmentCoordinator
from d4_enrichment.models import SessionToken
from d4_enrichment.places_enricher import PlacesEnricher

logger = get_logger(__name__, domain="d11")


def output_location_for(input_location: StorageLocation, output_bucket: str, prefix: str = "output-") -> StorageLocation:
    """Derive where the enriched copy of an input object is written"""
    if input_location.bucket == output_bucket:
        raise RecursiveTriggerError(output_bucket)
    return StorageLocation(bucket=output_bucket, key=prefix + input_location.key)


class TransformPipeline:
    """Orchestrates parse -> enrich -> serialize between two S3 buckets"""

    def __init__(
        self,
        settings: Settings,
        storage: S3ObjectStore,
        enricher: PlacesEnricher,
        places_client: Optional[GooglePlacesClient] = None,
    ):
        self.settings = settings
        self.storage = storage
        self.enricher = enricher
        self.places_client = places_client
        self.coordinator = EnrichmentCoordinator(
            enricher,
            max_concurrent=settings.max_concurrent_lookups,
            failure_policy=settings.failure_policy,
        )

        if settings.query_separator:
            logger.warning(
                f"Lookup queries join name, city and region with {settings.query_separator!r}; "
                "match results will differ from unseparated queries"
            )

    @classmethod
    def from_settings(cls, settings: Settings, storage: Optional[S3ObjectStore] = None) -> "TransformPipeline":
        """Build a pipeline wired to the real Google Places and S3 gateways"""
        places_client = GooglePlacesClient(
            api_key=settings.get_api_key(),
            base_url=settings.google_places_base_url,
            timeout=settings.request_timeout,
        )
        enricher = PlacesEnricher(places_client, query_separator=settings.query_separator)
        storage = storage or S3ObjectStore(region_name=settings.aws_region)
        return cls(settings, storage, enricher, places_client=places_client)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.places_client is not None:
            await self.places_client.aclose()

    def output_location_for(self, input_location: StorageLocation) -> StorageLocation:
        return output_location_for(input_location, self.settings.output_bucket, self.settings.output_key_prefix)

    async def transform(self, data: bytes) -> Tuple[bytes, BatchEnrichmentResult]:
        """Parse, enrich and serialize one dataset held in memory"""
        records = list(csv_codec.parse(data))
        logger.info(f"Parsed {len(records)} records")

        session_token = SessionToken.new()
        result = await self.coordinator.enrich_all(records, session_token)

        if result.failed:
            logger.warning(
                f"{result.failed} of {len(records)} records failed enrichment and were written unresolved",
                extra={"first_error": str(result.first_error)},
            )

        return csv_codec.serialize(result.records), result

    async def run(self, input_location: StorageLocation) -> StorageLocation:
        """
        Run the pipeline for one uploaded object

        Returns:
            Location of the enriched output

        Raises:
            RecursiveTriggerError: The input lives in the output bucket
            NotFoundError: The input object does not exist
            DecodeError: The input is not a valid dataset
            ExternalAPIError: A lookup failed (abort policy); nothing is uploaded
            StorageError: Download or upload failed
        """
        output_location = self.output_location_for(input_location)
        run_logger = logger.with_context(input=input_location.uri, output=output_location.uri)
        run_logger.info(f"Received input file {input_location.uri}")

        data = await asyncio.to_thread(self.storage.get, input_location)
        output, result = await self.transform(data)

        run_logger.info(
            f"Enriched {len(result.records)} records in {result.execution_time_seconds:.2f}s "
            f"({result.resolved} resolved, {result.unresolved} unresolved, {result.failed} failed)"
        )

        location = await asyncio.to_thread(self.storage.put, output_location, output)
        run_logger.info(f"Wrote enriched output to {location.uri}")
        return location
