"""VW-AUDIT Reporting Module"""

from .generator import ReportGenerator, REPORT_FORMATS, format_timestamp

__all__ = ["ReportGenerator", "REPORT_FORMATS", "format_timestamp"]
