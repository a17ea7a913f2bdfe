"""
Definition Context

Responsibilities:
- Ingests ladder definitions written in the markdown ladder dialect
- Builds the ordered Category -> CoreArea -> LevelContent tree

Owns: Ladder markdown grammar and the parsed ladder structure
Never: Tracks selections or talks to the report API
"""

from leveler.contexts.definition.ladder_data_structure import (
    Category,
    CoreArea,
    LadderDefinition,
    LevelContent,
)
from leveler.contexts.definition.parser import parse_ladder, parse_level_names

__all__ = [
    # Parsing
    "parse_ladder",
    "parse_level_names",
    # Data structure classes
    "Category",
    "CoreArea",
    "LevelContent",
    "LadderDefinition",
]
