"""
JSON document model built on the literal grammar.
"""

from .model import (
    JSON,
    NULL,
    JSONArray,
    JSONFactory,
    JSONObject,
    JSONParser,
    JSONType,
    parse_json,
    type_of,
)
from .writer import JSONWriter

__all__ = [
    "JSON",
    "NULL",
    "JSONArray",
    "JSONFactory",
    "JSONObject",
    "JSONParser",
    "JSONType",
    "JSONWriter",
    "parse_json",
    "type_of",
]
