"""
Report payloads and assessment export for the Assessment context.

Payload classes mirror the report API's request bodies. The export helpers
produce (and read back) the standalone JSON summary of an assessment, with a
median level per category and per-competency notes.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from leveler.contexts.assessment.assessment_data_structure import (
    AssessmentType,
    AssessmentUIData,
    Feedback,
    FeedbackEntry,
    ReportStatus,
    Responses,
    Selections,
    responses_to_payload,
)
from leveler.contexts.assessment.exceptions import InvalidAssessmentExportError
from leveler.contexts.assessment.logger import _log_warning
from leveler.contexts.definition import Category


@dataclass
class CreateReportInput:
    """Body of a report creation request."""

    user_id: str
    assessment_id: str
    assessment_type: AssessmentType
    assessor_id: str
    responses: Optional[Responses] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "userId": self.user_id,
            "assessmentId": self.assessment_id,
            "type": AssessmentType(self.assessment_type).value,
            "assessorId": self.assessor_id,
        }
        if self.responses is not None:
            payload["responses"] = responses_to_payload(self.responses)
        return payload


@dataclass
class UpdateReportInput:
    """Body of a report update request. Absent fields are left untouched server-side."""

    responses: Optional[Responses] = None
    status: Optional[ReportStatus] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {}
        if self.responses is not None:
            payload["responses"] = responses_to_payload(self.responses)
        if self.status is not None:
            payload["status"] = ReportStatus(self.status).value
        return payload


def median_level(values: list[int]) -> int:
    """
    Median of level values, rounded half up for even counts.

    Returns 0 for an empty list ("not assessed").
    """
    if not values:
        return 0

    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return math.floor((ordered[mid - 1] + ordered[mid]) / 2 + 0.5)
    return ordered[mid]


def build_assessment_export(
    team_member_name: str,
    current_level: int,
    categories: list[Category],
    selections: Selections,
    feedback: Feedback,
    way_forward: str = "",
) -> Dict[str, Any]:
    """
    Summarize an assessment as a JSON-ready dict.

    Each category gets the median of its positive selections and a note per
    answered competency ("L<level>", evidence, advice). Unanswered competencies
    are left out.

    Args:
        team_member_name: Person assessed
        current_level: Their current level on the ladder
        categories: Parsed ladder categories (fixes category and note order)
        selections: UI selections
        feedback: UI feedback
        way_forward: Closing narrative

    Returns:
        Export dict with "assessee", "currentLevel", "wayForward" and "leveling"
    """
    leveling = {}

    for category in categories:
        category_selections = selections.get(category.title, {})
        category_feedback = feedback.get(category.title, {})

        notes = {}
        for core_area in category.core_areas:
            level = category_selections.get(core_area.name)
            if level is None:
                continue
            entry = category_feedback.get(core_area.name, {}).get(level) or FeedbackEntry()
            notes[core_area.name] = {
                "level": f"L{level}",
                "evidence": entry.evidence,
                "advice": entry.next_level_feedback,
            }

        positive_levels = [value for value in category_selections.values() if value > 0]
        leveling[category.title] = {"level": median_level(positive_levels), "notes": notes}

    return {
        "assessee": team_member_name,
        "currentLevel": current_level,
        "wayForward": way_forward,
        "leveling": leveling,
    }


def _export_note_level(raw_level: Any) -> Optional[int]:
    """Read a note level written as 3 or "L3"; None when unusable."""
    if isinstance(raw_level, bool):
        return None
    if isinstance(raw_level, int):
        level = raw_level
    elif isinstance(raw_level, str):
        digits = raw_level[1:] if raw_level[:1] in ("L", "l") else raw_level
        if not digits.strip().isdigit():
            return None
        level = int(digits)
    else:
        return None
    return level if level >= 1 else None


def load_assessment_export(data: Dict[str, Any]) -> tuple[str, int, str, AssessmentUIData]:
    """
    Read an export produced by build_assessment_export().

    Notes with an unreadable level are logged and skipped.

    Args:
        data: Export dict

    Returns:
        Tuple of (team_member_name, current_level, way_forward, ui_data)

    Raises:
        InvalidAssessmentExportError: If assessee or leveling is missing
    """
    if not data.get("assessee") or not data.get("leveling"):
        raise InvalidAssessmentExportError("Export must contain 'assessee' and 'leveling'")

    selections: Selections = {}
    feedback: Feedback = {}

    for category_title, category_data in data["leveling"].items():
        selections[category_title] = {}
        feedback[category_title] = {}

        for core_area, note in (category_data.get("notes") or {}).items():
            level = _export_note_level(note.get("level"))
            if level is None:
                _log_warning(
                    f"Invalid level for {category_title}/{core_area}: {note.get('level')!r}"
                )
                continue
            selections[category_title][core_area] = level
            feedback[category_title][core_area] = {
                level: FeedbackEntry(
                    evidence=note.get("evidence") or "",
                    next_level_feedback=note.get("advice") or "",
                )
            }

    return (
        data["assessee"],
        int(data.get("currentLevel") or 1),
        data.get("wayForward") or "",
        AssessmentUIData(selections=selections, feedback=feedback),
    )
