"""
Google Places API client for business lookups

Autocomplete resolves a free-text query into ranked place ids; Place Details
turns a place id into address and contact data.
"""
from typing import Any, Dict, List

from core.exceptions import DecodeError, ExternalAPIError, NotFoundError

from ..base import BaseAPIClient

DETAIL_FIELDS = ["formatted_address", "international_phone_number", "website"]


class GooglePlacesClient(BaseAPIClient):
    """Google Places API client for business data"""

    def __init__(self, api_key: str, base_url: str | None = None, timeout: float = 30.0, client=None):
        super().__init__(provider="google_places", api_key=api_key, base_url=base_url, timeout=timeout, client=client)

    def _get_base_url(self) -> str:
        """Get Google Places API base URL"""
        return "https://maps.googleapis.com/maps/api/place"

    def _get_headers(self) -> Dict[str, str]:
        """Google Places uses API key in URL params, not headers"""
        return {
            "Accept": "application/json",
        }

    def _check_status(self, response: Dict[str, Any], operation: str) -> str:
        status = response.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            raise ExternalAPIError(
                provider=self.provider,
                message=f"{operation} returned {status}: {response.get('error_message', 'no error message')}",
                places_status=status,
            )
        return status

    async def resolve_candidates(self, query: str, session_token: str) -> List[str]:
        """
        Resolve a free-text query into ranked place ids

        Args:
            query: Free-text search string
            session_token: Autocomplete session token shared across one run

        Returns:
            Place ids in the order the service ranked them; empty when nothing matched
        """
        params = {
            "input": query,
            "sessiontoken": session_token,
            "key": self.api_key,
        }

        response = await self.make_request("GET", "/autocomplete/json", params=params)
        if self._check_status(response, "autocomplete") == "ZERO_RESULTS":
            return []

        predictions = response.get("predictions", [])
        if not isinstance(predictions, list):
            raise DecodeError("autocomplete predictions is not a list", provider=self.provider)

        place_ids = []
        for prediction in predictions:
            if not isinstance(prediction, dict) or not prediction.get("place_id"):
                raise DecodeError("autocomplete prediction without place_id", provider=self.provider)
            place_ids.append(prediction["place_id"])
        return place_ids

    async def fetch_details(self, place_id: str) -> Dict[str, str]:
        """
        Get address and contact details for a place

        Args:
            place_id: Google Place ID

        Returns:
            Dict with formatted_address, international_phone_number and website
            (empty string for fields the place does not publish)
        """
        params = {"place_id": place_id, "fields": ",".join(DETAIL_FIELDS), "key": self.api_key}

        response = await self.make_request("GET", "/details/json", params=params)
        if self._check_status(response, "details") == "ZERO_RESULTS":
            raise NotFoundError("place", place_id)

        result = response.get("result")
        if not isinstance(result, dict):
            raise DecodeError(f"details response for {place_id} has no result object", provider=self.provider)

        return {field: result.get(field) or "" for field in DETAIL_FIELDS}
