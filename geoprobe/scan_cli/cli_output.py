"""Console output for the CLI - Rich-formatted messages honouring quiet/silent modes"""

import logging
from typing import Any, Dict

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..scan_core.logging_setup import log_structured
from ..scan_core.models import ScanReport

logger = logging.getLogger(__name__)


class CLIOutput:
    """Operator-facing messages; every message is also logged"""
    
    def __init__(self, quiet: bool = False, silent: bool = False):
        self.quiet = quiet
        self.silent = silent
        self.console = Console(highlight=False)
        self.error_console = Console(stderr=True, highlight=False)
    
    def print_error(self, message: str, **context) -> None:
        log_structured(logger, 'ERROR', message, **context)
        self.error_console.print(f"❌ {escape(message)}", style="red")
    
    def print_warning(self, message: str, **context) -> None:
        log_structured(logger, 'WARNING', message, **context)
        if not self.silent and not self.quiet:
            self.console.print(f"⚠️  {escape(message)}", style="yellow")
    
    def print_success(self, message: str, **context) -> None:
        log_structured(logger, 'INFO', f"SUCCESS: {message}", **context)
        if not self.silent:
            self.console.print(f"✅ {escape(message)}", style="green")
    
    def print_summary(self, report: ScanReport) -> None:
        """Print the run statistics as a table"""
        if self.silent or self.quiet:
            return
        self.console.print(self.format_table(report.to_dict(), title="Scan Summary"))
    
    def format_table(self, data: Dict[str, Any], title: str) -> Table:
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        for key, value in data.items():
            table.add_row(key.replace('_', ' '), escape(str(value)))
        return table
