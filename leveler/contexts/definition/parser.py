"""
Ladder Definition Parser

Converts ladder definition markdown into an ordered Category tree.
Functions in this module are used by LadderDefinition.from_text() to build
definitions from markdown sources.

Parsing is best effort: lines that do not fit the grammar are dropped and the
parse never raises.
"""

import re
from enum import Enum
from typing import Optional

from leveler.contexts.definition.ladder_data_structure import Category, CoreArea, LevelContent
from leveler.contexts.definition.ladder_patterns import LadderPatterns
from leveler.contexts.definition.logger import _log_debug, log_parse_summary

CATEGORY_RE = re.compile(LadderPatterns.CATEGORY)
CORE_AREA_RE = re.compile(LadderPatterns.CORE_AREA)
LEVEL_RE = re.compile(LadderPatterns.LEVEL)
LEVEL_NAME_RE = re.compile(LadderPatterns.LEVEL_NAME)


class ParserPhase(Enum):
    """Where the parser sits in the category -> core area -> level hierarchy."""

    BEFORE_CATEGORY = "before_category"
    IN_CATEGORY = "in_category"
    IN_CORE_AREA = "in_core_area"
    COLLECTING_DESCRIPTION = "collecting_description"


class _LadderParseState:
    """
    Mutable cursor for a single parse_ladder() call.

    Holds the categories built so far, the open category/core area/level and the
    pending description buffer. A fresh instance is created per call.
    """

    def __init__(self):
        self.categories: list[Category] = []
        self.category: Optional[Category] = None
        self.core_area: Optional[CoreArea] = None
        self.level: Optional[LevelContent] = None
        self.description_lines: list[str] = []
        self.phase = ParserPhase.BEFORE_CATEGORY

    def flush_description(self) -> None:
        """Close description collection, writing the buffer to the open level."""
        if self.phase is not ParserPhase.COLLECTING_DESCRIPTION:
            return
        self.level.description = "\n".join(self.description_lines).strip()
        self.description_lines = []
        self.level = None
        self.phase = ParserPhase.IN_CORE_AREA

    def open_category(self, title: str) -> None:
        self.flush_description()
        self.category = Category(title=title)
        self.categories.append(self.category)
        self.core_area = None
        self.phase = ParserPhase.IN_CATEGORY

    def open_core_area(self, name: str) -> None:
        self.flush_description()
        if self.category is None:
            _log_debug(f"Dropping core area outside any category: {name!r}")
            return
        self.core_area = CoreArea(name=name)
        self.category.core_areas.append(self.core_area)
        self.phase = ParserPhase.IN_CORE_AREA

    def open_level(self, number: int, content: str) -> None:
        self.flush_description()
        if self.core_area is None:
            _log_debug(f"Dropping level {number} outside any core area")
            return
        if number < 1:
            _log_debug(f"Dropping level {number} in {self.core_area.name!r}: levels start at 1")
            return
        self.level = LevelContent(level=number, content=content)
        self.core_area.levels.append(self.level)
        self.description_lines = []
        self.phase = ParserPhase.COLLECTING_DESCRIPTION

    def feed(self, line: str) -> None:
        """Classify one source line and apply the matching transition."""
        trimmed = line.strip()

        category_match = CATEGORY_RE.match(trimmed)
        core_area_match = CORE_AREA_RE.match(trimmed)
        level_match = LEVEL_RE.match(trimmed)

        if category_match:
            self.open_category(category_match.group(1).strip())
        elif core_area_match:
            self.open_core_area(core_area_match.group(1).strip())
        elif level_match:
            self.open_level(int(level_match.group(1)), level_match.group(2).strip())
        elif self.phase is ParserPhase.COLLECTING_DESCRIPTION:
            # Verbatim, blank lines included, to keep intentional spacing
            self.description_lines.append(line.rstrip("\r"))


def parse_ladder(markdown: str) -> list[Category]:
    """
    Parse ladder definition markdown into categories.

    Grammar (each line trimmed before classification):
    - "# Title" opens a category
    - "## Name" opens a core area under the current category
    - "N. Content" opens level N under the current core area and starts
      collecting its description
    - any other line is appended to the description being collected,
      otherwise ignored

    Core areas without a category and levels without a core area are dropped.
    Order of appearance is preserved at every level of the tree.

    Args:
        markdown: Ladder definition text

    Returns:
        List of categories in source order

    Example:
        >>> categories = parse_ladder("# Tech\\n## Coding\\n1. Basic\\nSome desc")
        >>> categories[0].core_areas[0].levels[0].description
        'Some desc'
    """
    if not markdown:
        return []

    lines = markdown.split("\n")
    state = _LadderParseState()
    for line in lines:
        state.feed(line)
    state.flush_description()

    log_parse_summary(state.categories, len(lines))
    return state.categories


def parse_level_names(markdown: str) -> dict[int, str]:
    """
    Collect a level legend from numbered lines ("1. Apprentice", "2. Practitioner").

    Every numbered line with a non-empty name contributes; a later line with the
    same number replaces an earlier one.

    Args:
        markdown: Markdown text containing a numbered list

    Returns:
        Dict mapping level number to level name
    """
    levels = {}
    for line in markdown.split("\n"):
        match = LEVEL_NAME_RE.match(line.strip())
        if match:
            levels[int(match.group(1))] = match.group(2).strip()
    return levels
