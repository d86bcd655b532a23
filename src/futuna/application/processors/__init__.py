"""
Processors turning raw model output into validated payloads.
"""

from futuna.application.processors.payload_validator import PayloadValidator, parse_timestamp
from futuna.application.processors.response_extractor import extract_json_object

__all__ = ["extract_json_object", "PayloadValidator", "parse_timestamp"]
