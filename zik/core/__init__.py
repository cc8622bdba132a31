"""
Core functionality for zik
"""

from .errors import ZikError
from .models import Metadata, ScanResult

__all__ = [
    "Metadata",
    "ScanResult",
    "ZikError",
]
