"""
Unit tests for the assessment response codec.

Tests ui_to_api_format(), api_to_ui_format() and the feedback packing helpers
in leveler.contexts.assessment.codec.
"""

import pytest
from loguru import logger

from leveler.contexts.assessment import (
    AssessmentUIData,
    CompetencyResponse,
    FeedbackEntry,
    api_to_ui_format,
    ui_to_api_format,
)
from leveler.contexts.assessment.assessment_data_structure import (
    responses_from_payload,
    responses_to_payload,
)
from leveler.contexts.assessment.codec import pack_feedback, response_key, unpack_feedback


@pytest.fixture
def warnings():
    """Collect WARNING+ log messages emitted during a test."""
    messages = []
    sink_id = logger.add(
        lambda message: messages.append(message.record["message"]), level="WARNING"
    )
    yield messages
    logger.remove(sink_id)


class TestUiToApiFormat:
    """Flattening nested UI state into keyed responses."""

    def test_selection_with_feedback(self):
        responses = ui_to_api_format(
            {"Tech": {"Coding": 2}},
            {"Tech": {"Coding": {2: FeedbackEntry(evidence="did X", next_level_feedback="do Y")}}},
        )

        assert responses == {
            "Tech|Coding": CompetencyResponse(
                selected_level=2, feedback="Evidence: did X\nNext: do Y"
            )
        }

    def test_selection_without_feedback(self):
        responses = ui_to_api_format({"Tech": {"Coding": 3}}, {})

        assert responses == {"Tech|Coding": CompetencyResponse(selected_level=3, feedback=None)}
        assert responses_to_payload(responses) == {"Tech|Coding": {"selectedLevel": 3}}

    def test_feedback_for_other_level_not_carried(self):
        """Only feedback attached to the selected level is sent."""
        responses = ui_to_api_format(
            {"Tech": {"Coding": 3}},
            {"Tech": {"Coding": {2: FeedbackEntry(evidence="old", next_level_feedback="old")}}},
        )

        assert responses["Tech|Coding"].feedback is None

    def test_feedback_without_selection_dropped(self):
        responses = ui_to_api_format(
            {},
            {"Tech": {"Coding": {1: FeedbackEntry(evidence="orphan")}}},
        )

        assert responses == {}

    def test_empty_feedback_fields_still_packed(self):
        responses = ui_to_api_format(
            {"Tech": {"Coding": 1}}, {"Tech": {"Coding": {1: FeedbackEntry()}}}
        )

        assert responses["Tech|Coding"].feedback == "Evidence: \nNext: "

    def test_multiple_categories(self):
        selections = {"Tech": {"Coding": 2, "Design": 1}, "People": {"Mentoring": 4}}
        responses = ui_to_api_format(selections, {})

        assert set(responses) == {"Tech|Coding", "Tech|Design", "People|Mentoring"}
        assert responses["People|Mentoring"].selected_level == 4


class TestApiToUiFormat:
    """Rebuilding nested UI state from keyed responses."""

    def test_decodes_selection_and_feedback(self):
        ui_data = api_to_ui_format(
            {"Tech|Coding": CompetencyResponse(selected_level=2, feedback="Evidence: A\nNext: B")}
        )

        assert ui_data == AssessmentUIData(
            selections={"Tech": {"Coding": 2}},
            feedback={
                "Tech": {"Coding": {2: FeedbackEntry(evidence="A", next_level_feedback="B")}}
            },
        )

    def test_missing_feedback_leaves_no_entry(self):
        ui_data = api_to_ui_format({"Tech|Coding": CompetencyResponse(selected_level=1)})

        assert ui_data.selections == {"Tech": {"Coding": 1}}
        assert ui_data.feedback == {}

    def test_key_split_on_first_delimiter_only(self):
        ui_data = api_to_ui_format({"Tech|Coding|Extra": CompetencyResponse(selected_level=1)})

        assert ui_data.selections == {"Tech": {"Coding|Extra": 1}}

    @pytest.mark.parametrize("key", ["NoDelimiter", "|Coding", "Tech|", "|"])
    def test_invalid_keys_skipped_with_warning(self, key, warnings):
        ui_data = api_to_ui_format(
            {
                key: CompetencyResponse(selected_level=1),
                "Tech|Coding": CompetencyResponse(selected_level=2),
            }
        )

        assert ui_data.selections == {"Tech": {"Coding": 2}}
        assert any("Invalid response key format" in message for message in warnings)

    def test_round_trip_preserves_state(self):
        selections = {"Tech": {"Coding": 2, "Design": 3}, "People": {"Mentoring": 1}}
        feedback = {
            "Tech": {
                "Coding": {2: FeedbackEntry(evidence="shipped X", next_level_feedback="lead Y")}
            },
            "People": {"Mentoring": {1: FeedbackEntry(evidence="paired weekly")}},
        }

        ui_data = api_to_ui_format(ui_to_api_format(selections, feedback))

        assert ui_data.selections == selections
        assert ui_data.feedback == feedback

    def test_payload_decoding(self):
        responses = responses_from_payload(
            {"Tech|Coding": {"selectedLevel": 2, "feedback": "Evidence: A\nNext: B"}}
        )

        assert api_to_ui_format(responses).selections == {"Tech": {"Coding": 2}}


class TestFeedbackPacking:
    """Packing evidence and next level feedback into one string."""

    def test_multiline_evidence_survives(self):
        entry = FeedbackEntry(evidence="line one\nline two", next_level_feedback="grow")

        assert unpack_feedback(pack_feedback(entry)) == entry

    def test_unprefixed_text_becomes_evidence(self):
        assert unpack_feedback("free text") == FeedbackEntry(
            evidence="free text", next_level_feedback=""
        )

    def test_split_on_first_next_marker(self):
        """A second marker stays inside the next level feedback."""
        entry = unpack_feedback("Evidence: A\nNext: B\nNext: C")

        assert entry == FeedbackEntry(evidence="A", next_level_feedback="B\nNext: C")

    def test_marker_inside_evidence_is_lossy(self):
        entry = FeedbackEntry(evidence="see\nNext: steps", next_level_feedback="grow")

        assert unpack_feedback(pack_feedback(entry)) != entry

    def test_response_key(self):
        assert response_key("Tech", "Coding") == "Tech|Coding"
