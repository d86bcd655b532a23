#!/usr/bin/env python3
"""
Futuna - Model Response Extractor
Copyright (c) 2025 Vijaykumar Singh
Licensed under the Apache License 2.0

Recovers the JSON object from free-form model output, dropping code fences
and any prose around it.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


def extract_json_object(text: Optional[str]) -> str:
    """
    Return the substring from the first '{' to the last '}' inclusive.

    Text without such a pair is returned unchanged so the decode stage
    reports the failure instead of silently seeing an empty document.
    """
    if not text:
        return ""

    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end >= start:
        return text[start : end + 1]

    logger.warning("No JSON object found in model output (%d chars)", len(text))
    return text
