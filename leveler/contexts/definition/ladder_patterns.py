"""
Line patterns for the ladder definition markdown dialect.

A ladder definition is organized as:

    # Category title
    ## Core area (competency) name
    1. Level content
    Free-form description lines for level 1...
    2. Level content
"""


class LadderPatterns:
    """
    Regex patterns that classify a trimmed ladder definition line.

    Boundary patterns (category, core area, level) always end any description
    currently being collected.
    """

    # Category: "# Title" (exactly one hash followed by whitespace)
    CATEGORY: str = r"^#\s+(.*)$"

    # Core area: "## Name"
    CORE_AREA: str = r"^##\s+(.*)$"

    # Level: "3. Content" - captures level number and remainder (may be empty)
    LEVEL: str = r"^(\d+)\.\s*(.*)$"

    # Level legend entry: "3. Name" with a non-empty name
    LEVEL_NAME: str = r"^(\d+)\.\s*(.+)$"
