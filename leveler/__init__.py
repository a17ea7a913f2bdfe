"""
LEVELER - Ladder Evaluation, Leveling and Expectations Review

A competency assessment engine that consumes career ladder definitions written in
markdown and tracks a user's per-competency level selections through to a saved report.

Architecture:
- Definition Context: Ladder markdown ingestion and parsing
- Assessment Context: Selections, completion tracking, wire format and save scheduling
- Transport Context: Report API client, error classification and retry policy
"""

__version__ = "0.1.0"
