"""
Report identity nomenclature.

Reports are content-addressed by the person assessed, the assessment (season)
and who wrote it:

    <userId>|<assessmentId>|<type>      type is "self" or "manager"

Examples:
    >>> create_report_id("ada@example.com", "2025-H2", "self")
    'ada@example.com|2025-H2|self'
    >>> parse_report_id("ada@example.com|2025-H2|manager").assessment_type
    <AssessmentType.MANAGER: 'manager'>
"""

from dataclasses import dataclass
from typing import Union

from leveler.contexts.assessment.assessment_data_structure import AssessmentType
from leveler.contexts.assessment.exceptions import InvalidReportIdFormat

REPORT_ID_DELIMITER = "|"


@dataclass(frozen=True)
class ReportIdentity:
    """Parsed components of a report identifier."""

    user_id: str
    assessment_id: str
    assessment_type: AssessmentType

    @property
    def report_id(self) -> str:
        return create_report_id(self.user_id, self.assessment_id, self.assessment_type)


def create_report_id(
    user_id: str, assessment_id: str, assessment_type: Union[AssessmentType, str]
) -> str:
    """
    Join the identity fields with "|".

    No escaping is performed; callers must keep "|" out of every field.
    """
    type_value = (
        assessment_type.value if isinstance(assessment_type, AssessmentType) else assessment_type
    )
    return REPORT_ID_DELIMITER.join([user_id, assessment_id, type_value])


def parse_report_id(report_id: str) -> ReportIdentity:
    """
    Split a report identifier into its components.

    Args:
        report_id: "<userId>|<assessmentId>|<type>"

    Returns:
        ReportIdentity

    Raises:
        InvalidReportIdFormat: Unless there are exactly three non-empty segments
            and the last one is "self" or "manager"
    """
    segments = report_id.split(REPORT_ID_DELIMITER)

    if len(segments) != 3:
        raise InvalidReportIdFormat(report_id, f"expected 3 segments, got {len(segments)}")

    user_id, assessment_id, type_value = segments
    if not user_id or not assessment_id or not type_value:
        raise InvalidReportIdFormat(report_id, "empty segment")

    try:
        assessment_type = AssessmentType(type_value)
    except ValueError:
        raise InvalidReportIdFormat(report_id, f"invalid assessment type {type_value!r}")

    return ReportIdentity(user_id, assessment_id, assessment_type)
