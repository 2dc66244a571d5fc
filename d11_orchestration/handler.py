"""
AWS Lambda entrypoint for the transform pipeline

Invoked by S3 ObjectCreated notifications on the input bucket. Errors are
raised to the platform as invocation failures; there is no partial-success
response.
"""
import asyncio
from typing import Any, Dict, List
from urllib.parse import unquote_plus

from core.config import load_settings
from core.exceptions import ValidationError
from core.logging import get_logger, setup_logging
from d0_gateway.storage import StorageLocation

from .pipeline import TransformPipeline

logger = get_logger(__name__, domain="d11")


def locations_from_event(event: Dict[str, Any]) -> List[StorageLocation]:
    """Extract (bucket, key) pairs from an S3 notification event"""
    records = event.get("Records") if isinstance(event, dict) else None
    if not records:
        raise ValidationError("Event carries no S3 records", field="Records")

    locations = []
    for i, record in enumerate(records):
        try:
            bucket = record["s3"]["bucket"]["name"]
            key = unquote_plus(record["s3"]["object"]["key"])
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Malformed S3 record: missing {e}", field=f"Records[{i}]") from e
        locations.append(StorageLocation(bucket=bucket, key=key))
    return locations


async def process_event(event: Dict[str, Any], settings) -> str:
    locations = locations_from_event(event)

    output_uri = ""
    async with TransformPipeline.from_settings(settings) as pipeline:
        for location in locations:
            output_location = await pipeline.run(location)
            output_uri = output_location.uri
    return output_uri


def handler(event: Dict[str, Any], context: Any = None) -> str:
    """
    Lambda handler

    Returns:
        URI of the enriched output for the last record in the event
    """
    settings = load_settings()
    setup_logging(settings)

    request_id = getattr(context, "aws_request_id", None)
    logger.info("Transform invocation started", extra={"request_id": request_id})

    return asyncio.run(process_event(event, settings))
