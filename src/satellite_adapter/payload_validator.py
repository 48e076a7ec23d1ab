"""
PayloadValidator module for decoding and validating Satellite API responses
"""

import json
import logging
from typing import Dict, Any

from .errors import DecodeError
from .http_client import APIResponse

logger = logging.getLogger(__name__)


class PayloadValidator:
    """Decodes JSON bodies and checks the page envelope shape needed for pagination"""

    INTEGER_FIELDS = ('total', 'subtotal', 'per_page')

    def decode_json(self, response: APIResponse) -> Any:
        """
        Decode the response body as JSON

        Args:
            response: APIResponse with the raw body

        Returns:
            Decoded JSON value

        Raises:
            DecodeError: If the body is not valid JSON
        """
        try:
            return json.loads(response.text)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"response from {response.url!r} is not valid JSON: {e}") from e

    def decode_object(self, response: APIResponse) -> Dict[str, Any]:
        """
        Decode a response body that must be a single JSON object

        Raises:
            DecodeError: If the body is not a JSON object
        """
        data = self.decode_json(response)
        if not isinstance(data, dict):
            raise DecodeError(f"response from {response.url!r} is not a JSON object")
        return data

    def decode_envelope(self, response: APIResponse) -> Dict[str, Any]:
        """
        Decode and validate a paginated envelope

        Args:
            response: APIResponse holding a page of a collection

        Returns:
            The decoded envelope as a dictionary

        Raises:
            DecodeError: If the envelope lacks a results list, has non-object
                records, non-integer counters, or a non-positive page size
                while reporting results
        """
        data = self.decode_object(response)

        if not self.validate_json_structure(data):
            raise DecodeError(f"response from {response.url!r} has no 'results' list")

        for name in self.INTEGER_FIELDS:
            if not self.validate_integer_field(data, name):
                raise DecodeError(
                    f"field {name!r} in response from {response.url!r} is not an integer: {data[name]!r}"
                )

        for index, record in enumerate(data['results']):
            if not isinstance(record, dict):
                raise DecodeError(
                    f"record {index} in response from {response.url!r} is not an object"
                )

        total = data.get('total') or 0
        per_page = data.get('per_page') or 0
        if total > 0 and per_page <= 0:
            raise DecodeError(
                f"response from {response.url!r} reports {total} results with page size {per_page}"
            )

        if data.get('error'):
            logger.warning(f"API reported an error alongside results: {data['error']}")

        return data

    def validate_json_structure(self, data: Dict[str, Any]) -> bool:
        """
        Check that the envelope carries a results list

        Args:
            data: Decoded envelope

        Returns:
            True if 'results' is present and is a list
        """
        return isinstance(data.get('results'), list)

    def validate_integer_field(self, data: Dict[str, Any], name: str) -> bool:
        """Absent or null counters are accepted (they read as 0); present ones must be ints"""
        if data.get(name) is None:
            return True
        value = data[name]
        return isinstance(value, int) and not isinstance(value, bool)
