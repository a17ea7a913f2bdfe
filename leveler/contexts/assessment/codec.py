"""
Assessment Response Codec

Converts between the UI format (selections and feedback nested by category) and
the flat API format keyed by "category|competency".

Feedback is packed into a single string:

    "Evidence: <evidence>\\nNext: <next level feedback>"

Unpacking splits on the first "\\nNext: " and strips a leading "Evidence: ".
Free text that itself contains either marker does not survive a round trip;
that limitation is accepted rather than escaped.
"""

from leveler.contexts.assessment.assessment_data_structure import (
    AssessmentUIData,
    CompetencyResponse,
    Feedback,
    FeedbackEntry,
    Responses,
    Selections,
)
from leveler.contexts.assessment.logger import _log_warning

RESPONSE_KEY_DELIMITER = "|"
EVIDENCE_PREFIX = "Evidence: "
NEXT_LEVEL_MARKER = "\nNext: "


def response_key(category: str, competency: str) -> str:
    """Build the flat response key. Names must not contain the delimiter."""
    return f"{category}{RESPONSE_KEY_DELIMITER}{competency}"


def pack_feedback(entry: FeedbackEntry) -> str:
    return f"{EVIDENCE_PREFIX}{entry.evidence}{NEXT_LEVEL_MARKER}{entry.next_level_feedback}"


def unpack_feedback(feedback: str) -> FeedbackEntry:
    """Recover evidence and next level feedback from a packed feedback string."""
    evidence_part, _, next_part = feedback.partition(NEXT_LEVEL_MARKER)
    if evidence_part.startswith(EVIDENCE_PREFIX):
        evidence_part = evidence_part[len(EVIDENCE_PREFIX) :]
    return FeedbackEntry(evidence=evidence_part, next_level_feedback=next_part)


def ui_to_api_format(selections: Selections, feedback: Feedback) -> Responses:
    """
    Flatten UI selections and feedback into keyed responses.

    Feedback is only carried for the level currently selected.

    Args:
        selections: category -> competency -> selected level
        feedback: category -> competency -> level -> FeedbackEntry

    Returns:
        Dict of "category|competency" -> CompetencyResponse

    Example:
        >>> ui_to_api_format(
        ...     {"Tech": {"Coding": 2}},
        ...     {"Tech": {"Coding": {2: FeedbackEntry("did X", "do Y")}}},
        ... )
        {'Tech|Coding': CompetencyResponse(selected_level=2, feedback='Evidence: did X\\nNext: do Y')}
    """
    responses = {}

    for category, competencies in selections.items():
        category_feedback = feedback.get(category, {})
        for competency, level in competencies.items():
            entry = category_feedback.get(competency, {}).get(level)
            responses[response_key(category, competency)] = CompetencyResponse(
                selected_level=level,
                feedback=pack_feedback(entry) if entry is not None else None,
            )

    return responses


def api_to_ui_format(responses: Responses) -> AssessmentUIData:
    """
    Rebuild UI selections and feedback from keyed responses.

    Keys are split once on the first "|". Keys with an empty category or
    competency segment are logged and skipped; the remaining entries still decode.

    Args:
        responses: Dict of "category|competency" -> CompetencyResponse

    Returns:
        AssessmentUIData with nested selections and feedback
    """
    selections: Selections = {}
    feedback: Feedback = {}

    for key, response in responses.items():
        category, _, competency = key.partition(RESPONSE_KEY_DELIMITER)

        if not category or not competency:
            _log_warning(f"Invalid response key format: {key!r}")
            continue

        level = response.selected_level
        selections.setdefault(category, {})[competency] = level

        if response.feedback is not None:
            feedback.setdefault(category, {}).setdefault(competency, {})[level] = unpack_feedback(
                response.feedback
            )

    return AssessmentUIData(selections=selections, feedback=feedback)
