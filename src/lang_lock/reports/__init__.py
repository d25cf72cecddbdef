"""Report rendering for the CLI."""

from lang_lock.reports.console import make_console, render_export_report, render_generate_report

__all__ = ["make_console", "render_export_report", "render_generate_report"]
