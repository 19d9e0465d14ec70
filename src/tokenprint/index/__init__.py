"""Fingerprint indexing package."""

from .fingerprints import FingerprintIndex
from .models import Fingerprint, Occurrence

__all__ = ["Fingerprint", "FingerprintIndex", "Occurrence"]
