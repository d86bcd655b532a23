#!/usr/bin/env python3
"""
Futuna - JSON Utilities
Copyright (c) 2025 Vijaykumar Singh
Licensed under the Apache License 2.0

JSON Utilities - Centralized JSON handling functions
"""

import json
from typing import Any


def safe_json_dumps(obj: Any, **kwargs) -> str:
    """Safely encode object to JSON with UTF-8 encoding, handling binary characters"""
    return json.dumps(obj, ensure_ascii=False, **kwargs)


def safe_json_loads(json_str: Any) -> Any:
    """Safely decode JSON string with UTF-8 encoding"""
    # If already a dict/list (from JSON columns), return as-is
    if isinstance(json_str, (dict, list)):
        return json_str
    if isinstance(json_str, bytes):
        json_str = json_str.decode("utf-8", errors="replace")
    return json.loads(json_str)


def json_document(raw: Any) -> Any:
    """
    Decode a raw exchange for a JSON column.

    Text that is not valid JSON is kept verbatim as a JSON string so the
    audit record always holds exactly what went over the wire.
    """
    if raw is None:
        return None
    try:
        return safe_json_loads(raw)
    except (TypeError, ValueError):
        return raw if isinstance(raw, str) else str(raw)
