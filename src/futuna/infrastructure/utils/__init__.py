"""
Shared infrastructure helpers.
"""

from futuna.infrastructure.utils.json_utils import json_document, safe_json_dumps, safe_json_loads

__all__ = ["safe_json_dumps", "safe_json_loads", "json_document"]
