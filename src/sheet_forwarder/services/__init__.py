"""
Services Layer.

Business logic orchestration:
- Sheet row processing (search then forward)
"""

from sheet_forwarder.services.processor import RowProcessor


__all__ = [
    "RowProcessor",
]
