from .report_store import ReportStore, REPORT_EVENT, INCOMPLETE_REPORT, INVALID_SEVERITY
