"""
S3 object storage gateway

Reads input datasets, writes enriched output, and runs S3 Select queries over
stored objects. boto3 is blocking; async callers wrap these calls in
asyncio.to_thread.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import DecodeError, NotFoundError, StorageError
from core.logging import get_logger

logger = get_logger(__name__, domain="d0")

MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}

RESOLVED_ROWS_QUERY = "SELECT COUNT(*) as \"count\" FROM S3Object WHERE Address IS NOT NULL AND Address <> ''"


@dataclass(frozen=True)
class StorageLocation:
    """A (bucket, key) pair identifying one stored object"""

    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def __str__(self) -> str:
        return self.uri


class S3ObjectStore:
    """Thin wrapper over a boto3 S3 client that maps failures to LeadFill errors"""

    def __init__(self, client=None, region_name: Optional[str] = None):
        self.client = client or boto3.client("s3", region_name=region_name)

    def get(self, location: StorageLocation) -> bytes:
        """
        Download an object's full body

        Raises:
            NotFoundError: The bucket or key does not exist
            StorageError: Any other transport or service failure
        """
        try:
            obj = self.client.get_object(Bucket=location.bucket, Key=location.key)
            body = obj["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in MISSING_OBJECT_CODES:
                raise NotFoundError("object", location.uri) from e
            raise StorageError(f"Unable to download {location.uri}: {e}", operation="get", code=code) from e
        except BotoCoreError as e:
            raise StorageError(f"Unable to download {location.uri}: {e}", operation="get") from e

        logger.info(f"Downloaded {len(body)} bytes from {location.uri}")
        return body

    def put(self, location: StorageLocation, data: bytes, content_type: str = "text/csv") -> StorageLocation:
        """Upload bytes, overwriting any existing object at the same key"""
        try:
            self.client.put_object(Bucket=location.bucket, Key=location.key, Body=data, ContentType=content_type)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Unable to upload {location.uri}: {e}", operation="put") from e

        logger.info(f"Uploaded {len(data)} bytes to {location.uri}")
        return location

    def select(
        self,
        location: StorageLocation,
        expression: str,
        input_serialization: Dict[str, Any],
        output_serialization: Dict[str, Any],
    ) -> bytes:
        """
        Run an S3 Select query and return the concatenated record payloads

        The event stream is drained completely; a failure on the initial call
        or while reading the stream raises StorageError, as does a stream that
        ends without its End event.
        """
        try:
            response = self.client.select_object_content(
                Bucket=location.bucket,
                Key=location.key,
                ExpressionType="SQL",
                Expression=expression,
                InputSerialization=input_serialization,
                OutputSerialization=output_serialization,
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in MISSING_OBJECT_CODES:
                raise NotFoundError("object", location.uri) from e
            raise StorageError(f"Select on {location.uri} failed: {e}", operation="select", code=code) from e
        except BotoCoreError as e:
            raise StorageError(f"Select on {location.uri} failed: {e}", operation="select") from e

        chunks = []
        completed = False
        try:
            for event in response["Payload"]:
                if "Records" in event:
                    chunks.append(event["Records"]["Payload"])
                elif "End" in event:
                    completed = True
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                f"Failed to read from the select event stream for {location.uri}: {e}", operation="select"
            ) from e

        if not completed:
            raise StorageError(f"Select event stream for {location.uri} ended before completion", operation="select")

        return b"".join(chunks)

    def count_resolved_rows(self, location: StorageLocation) -> int:
        """Count output rows that carry a resolved address"""
        payload = self.select(
            location,
            RESOLVED_ROWS_QUERY,
            input_serialization={"CSV": {"FileHeaderInfo": "USE"}},
            output_serialization={"JSON": {}},
        )
        try:
            return int(json.loads(payload)["count"])
        except (ValueError, KeyError, TypeError) as e:
            raise DecodeError(f"Unexpected count payload from {location.uri}: {payload!r}") from e
