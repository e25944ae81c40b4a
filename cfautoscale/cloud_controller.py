"""
Helpers for reading control plane (cloud controller v2) list responses.

Keys are matched without regard to case, so ``Resources`` / ``Metadata`` /
``GUID`` and ``resources`` / ``metadata`` / ``guid`` are read the same way.
"""

from jsonschema import ValidationError

from cfautoscale.json_schema import validate
from cfautoscale.util.http import ResponseParseError


def lower_keys(body):
    """
    Return ``body`` with the keys of every nested object lower-cased.
    """
    if isinstance(body, dict):
        return {key.lower(): lower_keys(value) for key, value in body.items()}
    if isinstance(body, list):
        return [lower_keys(item) for item in body]
    return body


def parse_resources(body, schema):
    """
    Validate a list response against ``schema`` and return its resources.

    :raise ResponseParseError: if the response does not match, e.g. a
        resource is missing its GUID.
    """
    body = lower_keys(body)
    try:
        validate(body, schema)
    except ValidationError as e:
        raise ResponseParseError(e.message)
    return body['resources']
