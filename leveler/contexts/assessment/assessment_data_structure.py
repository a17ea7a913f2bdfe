"""
Assessment data structures for the Assessment context.

Two shapes describe the same assessment state:

UI format (nested by category, what the assessment screens edit):
    selections: {"Technical Execution": {"Code Quality": 3}}
    feedback:   {"Technical Execution": {"Code Quality": {3: FeedbackEntry(...)}}}

API format (flat, keyed by "category|competency", what the report API stores):
    {"Technical Execution|Code Quality": CompetencyResponse(selected_level=3, feedback="...")}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AssessmentType(str, Enum):
    """Who the assessment is written by."""

    SELF = "self"
    MANAGER = "manager"


class ReportStatus(str, Enum):
    """Workflow status of a persisted report."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


@dataclass
class FeedbackEntry:
    """Narrative feedback attached to the selected level of one competency."""

    evidence: str = ""
    next_level_feedback: str = ""

    def to_dict(self) -> dict:
        return {"evidence": self.evidence, "nextLevelFeedback": self.next_level_feedback}

    @classmethod
    def from_dict(cls, data: dict) -> "FeedbackEntry":
        return cls(
            evidence=data.get("evidence") or "",
            next_level_feedback=data.get("nextLevelFeedback") or "",
        )


# category title -> competency name -> selected level
Selections = dict[str, dict[str, int]]

# category title -> competency name -> selected level -> feedback
Feedback = dict[str, dict[str, dict[int, FeedbackEntry]]]


@dataclass
class CompetencyResponse:
    """
    Wire-format response for one competency.

    Attributes:
        selected_level: Level chosen for the competency
        feedback: "Evidence: <evidence>\\nNext: <next level feedback>", absent without feedback
    """

    selected_level: int
    feedback: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"selectedLevel": self.selected_level}
        if self.feedback is not None:
            data["feedback"] = self.feedback
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CompetencyResponse":
        """
        Build from a camelCase payload dict.

        Raises:
            KeyError: If selectedLevel is missing
        """
        return cls(selected_level=int(data["selectedLevel"]), feedback=data.get("feedback"))


# "category|competency" -> response
Responses = dict[str, CompetencyResponse]


def feedback_to_dict(feedback: Feedback) -> dict:
    """JSON-ready feedback; level keys become strings."""
    return {
        category: {
            competency: {str(level): entry.to_dict() for level, entry in levels.items()}
            for competency, levels in competencies.items()
        }
        for category, competencies in feedback.items()
    }


def feedback_from_dict(raw: dict) -> Feedback:
    """Inverse of feedback_to_dict(); JSON object keys come back as ints."""
    return {
        category: {
            competency: {
                int(level): FeedbackEntry.from_dict(entry) for level, entry in levels.items()
            }
            for competency, levels in competencies.items()
        }
        for category, competencies in raw.items()
    }


def selections_from_dict(raw: dict) -> Selections:
    return {
        category: {competency: int(level) for competency, level in competencies.items()}
        for category, competencies in raw.items()
    }


@dataclass
class AssessmentUIData:
    """Selections and feedback in UI format."""

    selections: Selections = field(default_factory=dict)
    feedback: Feedback = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"selections": self.selections, "feedback": feedback_to_dict(self.feedback)}

    @classmethod
    def from_dict(cls, data: dict) -> "AssessmentUIData":
        return cls(
            selections=selections_from_dict(data.get("selections") or {}),
            feedback=feedback_from_dict(data.get("feedback") or {}),
        )


def responses_to_payload(responses: Responses) -> dict[str, dict]:
    """Serialize responses to the JSON payload shape."""
    return {key: response.to_dict() for key, response in responses.items()}


def responses_from_payload(payload: dict[str, dict]) -> Responses:
    """Deserialize a JSON responses payload."""
    return {key: CompetencyResponse.from_dict(value) for key, value in payload.items()}
