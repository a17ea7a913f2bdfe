"""Custom exceptions for the assessment context."""

from typing import Optional


class InvalidReportIdFormat(ValueError):
    """
    Exception raised when a report identifier cannot be parsed.

    Attributes:
        report_id: The identifier that failed to parse
        reason: Which rule the identifier broke
    """

    def __init__(self, report_id: str, reason: Optional[str] = None):
        self.report_id = report_id
        self.reason = reason

        message = f"Invalid report ID format: {report_id!r}"
        if reason:
            message += f" ({reason})"

        super().__init__(message)


class InvalidAssessmentExportError(ValueError):
    """
    Exception raised when an assessment export file is missing required fields.

    Raised for exports without an assessee or leveling section.
    """

    pass
