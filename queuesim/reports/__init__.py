"""Reporting of simulation results."""

from .report_writer import ReportWriter

__all__ = ["ReportWriter"]
