"""
Shared utilities for LEVELER.

Common functionality used across contexts:
- Logger setup with provenance
- Timestamps
- Settings loading
- Local key/value storage
"""

from leveler.utils.timestamp import format_timestamp, now, now_exact

__all__ = ["format_timestamp", "now", "now_exact"]
