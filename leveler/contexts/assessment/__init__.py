"""
Assessment Context

Responsibilities:
- Tracks per-competency level selections and narrative feedback
- Evaluates which categories are complete
- Converts between UI (nested) and API (flat) response formats
- Builds and parses content-addressed report identifiers
- Schedules saves through an explicit save-status state machine

Owns: Assessment working state, response wire format, report identity
Never: Parses ladder markdown or performs HTTP itself
"""

from leveler.contexts.assessment.assessment_data_structure import (
    AssessmentType,
    AssessmentUIData,
    CompetencyResponse,
    FeedbackEntry,
    ReportStatus,
)
from leveler.contexts.assessment.codec import api_to_ui_format, ui_to_api_format
from leveler.contexts.assessment.completion import completion_progress, evaluate_completion
from leveler.contexts.assessment.exceptions import InvalidReportIdFormat
from leveler.contexts.assessment.report import (
    CreateReportInput,
    UpdateReportInput,
    build_assessment_export,
    load_assessment_export,
)
from leveler.contexts.assessment.report_identity import (
    ReportIdentity,
    create_report_id,
    parse_report_id,
)
from leveler.contexts.assessment.save_orchestrator import (
    Failed,
    Idle,
    SaveOrchestrator,
    Saved,
    SaveStatus,
    Saving,
    describe_save_state,
)
from leveler.contexts.assessment.state_store import AssessmentStateStore

__all__ = [
    # Data structure classes
    "AssessmentType",
    "AssessmentUIData",
    "CompetencyResponse",
    "FeedbackEntry",
    "ReportStatus",
    "AssessmentStateStore",
    # Codec
    "ui_to_api_format",
    "api_to_ui_format",
    # Completion
    "evaluate_completion",
    "completion_progress",
    # Report identity and payloads
    "ReportIdentity",
    "InvalidReportIdFormat",
    "create_report_id",
    "parse_report_id",
    "CreateReportInput",
    "UpdateReportInput",
    "build_assessment_export",
    "load_assessment_export",
    # Save orchestration
    "SaveOrchestrator",
    "SaveStatus",
    "Idle",
    "Saving",
    "Saved",
    "Failed",
    "describe_save_state",
]
