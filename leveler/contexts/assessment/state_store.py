"""
Assessment state store.

Holds the working state of one assessment session: selections, feedback, the
person assessed and their current level. A selection and its feedback are one
record keyed by (category, competency, level); feedback is only kept for the
level currently selected.

The store can be persisted to the local key/value shim and reloaded:

    store = AssessmentStateStore()
    store.select("Tech", "Coding", 2, evidence="did X", next_level_feedback="do Y")
    store.save_local(storage)
    restored = AssessmentStateStore.load_local(storage)
"""

import copy
from typing import Any, Callable, Optional

from leveler.contexts.assessment.assessment_data_structure import (
    AssessmentUIData,
    Feedback,
    FeedbackEntry,
    Responses,
    Selections,
    feedback_from_dict,
    feedback_to_dict,
    selections_from_dict,
)
from leveler.contexts.assessment.codec import api_to_ui_format, ui_to_api_format
from leveler.contexts.assessment.logger import _log_debug, _log_error
from leveler.utils.local_storage import LocalStorage

# Local storage keys
SELECTIONS_KEY = "leveling-selections"
FEEDBACK_KEY = "leveling-feedback"
TEAM_MEMBER_KEY = "team-member-name"
CURRENT_LEVEL_KEY = "current-level"


class AssessmentStateStore:
    """Mutable selections/feedback state for a single assessment session."""

    def __init__(
        self,
        selections: Optional[Selections] = None,
        feedback: Optional[Feedback] = None,
        team_member_name: str = "",
        current_level: int = 1,
    ):
        self.selections: Selections = selections if selections is not None else {}
        self.feedback: Feedback = feedback if feedback is not None else {}
        self.team_member_name = team_member_name
        self.current_level = current_level

    def select(
        self,
        category: str,
        competency: str,
        level: int,
        evidence: str = "",
        next_level_feedback: str = "",
    ) -> None:
        """Record a level selection together with its feedback."""
        self.selections.setdefault(category, {})[competency] = level
        self.feedback.setdefault(category, {})[competency] = {
            level: FeedbackEntry(evidence=evidence, next_level_feedback=next_level_feedback)
        }
        _log_debug(f"Selected level {level} for {category}/{competency}")

    def deselect(self, category: str, competency: str) -> None:
        category_selections = self.selections.get(category, {})
        if competency not in category_selections:
            return
        del category_selections[competency]
        self.feedback.get(category, {}).pop(competency, None)
        if not category_selections:
            self.selections.pop(category, None)
        if category in self.feedback and not self.feedback[category]:
            del self.feedback[category]

    def selection(self, category: str, competency: str) -> Optional[int]:
        return self.selections.get(category, {}).get(competency)

    def feedback_for(self, category: str, competency: str) -> Optional[FeedbackEntry]:
        """Feedback recorded for the currently selected level, if any."""
        level = self.selection(category, competency)
        if level is None:
            return None
        return self.feedback.get(category, {}).get(competency, {}).get(level)

    def has_selections(self) -> bool:
        return any(self.selections.values())

    def clear(self) -> None:
        """Start a new assessment: drop everything."""
        self.selections = {}
        self.feedback = {}
        self.team_member_name = ""
        self.current_level = 1

    def snapshot(self) -> AssessmentUIData:
        """Deep copy of selections and feedback, detached from later edits."""
        return AssessmentUIData(
            selections=copy.deepcopy(self.selections),
            feedback=copy.deepcopy(self.feedback),
        )

    # =========================================================================
    # WIRE FORMAT
    # =========================================================================

    def to_responses(self) -> Responses:
        return ui_to_api_format(self.selections, self.feedback)

    def load_responses(self, responses: Responses) -> None:
        """Replace selections and feedback with those decoded from API responses."""
        ui_data = api_to_ui_format(responses)
        self.selections = ui_data.selections
        self.feedback = ui_data.feedback

    # =========================================================================
    # LOCAL PERSISTENCE
    # =========================================================================

    def save_local(self, storage: LocalStorage) -> None:
        storage.set(SELECTIONS_KEY, self.selections)
        storage.set(FEEDBACK_KEY, feedback_to_dict(self.feedback))
        storage.set(TEAM_MEMBER_KEY, self.team_member_name)
        storage.set(CURRENT_LEVEL_KEY, self.current_level)

    @classmethod
    def load_local(cls, storage: LocalStorage) -> "AssessmentStateStore":
        """
        Restore a store from local storage.

        Missing, unreadable or wrongly shaped entries fall back to an empty
        assessment; each bad entry is logged and skipped.
        """
        team_member_name = storage.get(TEAM_MEMBER_KEY, "")
        if not isinstance(team_member_name, str):
            _log_error(f"Ignoring stored {TEAM_MEMBER_KEY}: expected a string")
            team_member_name = ""

        current_level = storage.get(CURRENT_LEVEL_KEY, 1)
        if isinstance(current_level, bool) or not isinstance(current_level, int):
            _log_error(f"Ignoring stored {CURRENT_LEVEL_KEY}: expected an integer")
            current_level = 1

        return cls(
            selections=_restore_entry(storage, SELECTIONS_KEY, selections_from_dict),
            feedback=_restore_entry(storage, FEEDBACK_KEY, feedback_from_dict),
            team_member_name=team_member_name,
            current_level=current_level,
        )


def _restore_entry(storage: LocalStorage, key: str, convert: Callable[[dict], Any]) -> Any:
    raw = storage.get(key, {}) or {}
    try:
        return convert(raw)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        _log_error(f"Ignoring stored {key}: {type(e).__name__}: {e}")
        return {}
