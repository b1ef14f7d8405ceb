"""Report generation modules for freshtime."""

from .weekly import ClientSummary, WeeklySummary, build_summary
from .report_generator import ReportGenerator
from .invoice import InvoiceDraft, InvoiceLine, build_invoice_lines

__all__ = [
    'ClientSummary', 'WeeklySummary', 'build_summary', 'ReportGenerator',
    'InvoiceDraft', 'InvoiceLine', 'build_invoice_lines'
]
