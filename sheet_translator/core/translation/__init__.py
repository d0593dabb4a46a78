"""
Translation layer: model client, response parsing and batching.
"""

from .gemini_client import GeminiClient
from .batch_translator import BatchTranslator, BATCH_SIZE
from .response_parser import extract_json_array, parse_translation_pairs

__all__ = [
    'GeminiClient',
    'BatchTranslator',
    'BATCH_SIZE',
    'extract_json_array',
    'parse_translation_pairs'
]
