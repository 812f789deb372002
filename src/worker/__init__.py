"""Background workers for the storefront"""
from .monthly_invoicing import MonthlyInvoicingWorker

__all__ = ["MonthlyInvoicingWorker"]
