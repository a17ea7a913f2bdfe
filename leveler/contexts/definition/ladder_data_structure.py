"""
Ladder definition data structures for the Definition context.

Provides the typed hierarchy produced by the parser (Category -> CoreArea ->
LevelContent) and the LadderDefinition wrapper consumed by the Assessment context.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class LevelContent:
    """
    A numbered rubric entry for one competency.

    Attributes:
        level: Level number as written in the source (not necessarily contiguous)
        content: Text on the numbered line itself
        description: Lines collected below the numbered line (trimmed)
    """

    level: int
    content: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"level": self.level, "content": self.content}
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class CoreArea:
    """A competency evaluated across levels, levels in source order."""

    name: str
    levels: list[LevelContent] = field(default_factory=list)

    def level(self, number: int) -> Optional[LevelContent]:
        """
        Look up a level by number.

        Duplicate level numbers are permitted in the source; the first one wins.
        """
        for entry in self.levels:
            if entry.level == number:
                return entry
        return None

    def to_dict(self) -> dict:
        return {"name": self.name, "levels": [entry.to_dict() for entry in self.levels]}


@dataclass
class Category:
    """Top-level grouping of competencies, core areas in source order."""

    title: str
    core_areas: list[CoreArea] = field(default_factory=list)

    def core_area(self, name: str) -> Optional[CoreArea]:
        for core_area in self.core_areas:
            if core_area.name == name:
                return core_area
        return None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "coreAreas": [core_area.to_dict() for core_area in self.core_areas],
        }


@dataclass
class LadderDefinition:
    """
    Parsed ladder definition.

    The category tree is built once per markdown source and treated as
    read-only afterwards; re-parse to pick up source changes.

    Factory methods:
        from_text(text) - Parse raw markdown text
        from_file(path) - Load from a markdown file
    """

    categories: list[Category]
    raw_text: str = ""
    source_path: Optional[Path] = None

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_text(cls, text: str, source_path: Optional[Path] = None) -> "LadderDefinition":
        """Parse ladder markdown and wrap the resulting category tree."""
        from leveler.contexts.definition.parser import parse_ladder

        return cls(categories=parse_ladder(text), raw_text=text, source_path=source_path)

    @classmethod
    def from_file(cls, file_path: Path) -> "LadderDefinition":
        """
        Load and parse a ladder markdown file.

        Raises:
            FileNotFoundError: If file_path does not exist
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Ladder definition not found: {file_path}")
        return cls.from_text(file_path.read_text(encoding="utf-8"), source_path=file_path)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def category_titles(self) -> list[str]:
        return [category.title for category in self.categories]

    def category(self, title: str) -> Optional[Category]:
        for category in self.categories:
            if category.title == title:
                return category
        return None

    def core_area(self, category_title: str, name: str) -> Optional[CoreArea]:
        category = self.category(category_title)
        return category.core_area(name) if category else None

    def to_dict(self) -> dict:
        return {"categories": [category.to_dict() for category in self.categories]}
