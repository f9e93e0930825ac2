"""
Report export with a transient status.

Exports run against a ledger snapshot. The outcome is kept as a status
(success or error plus a message) that falls back to idle after a few
seconds, the way a dashboard banner would dismiss itself.
"""

import threading
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from pydantic import BaseModel

from ..exceptions import ReportExportError
from ..models import ReportType, TimeRange
from ..utils import get_logger
from .ledger_store import LedgerStore
from .report_service import ReportService, combined_daily_logs

if TYPE_CHECKING:
    from ..reports import PDFService


class ExportStatus(str, Enum):
    """Export banner states."""
    IDLE = "idle"
    SUCCESS = "success"
    ERROR = "error"


class ExportState(BaseModel):
    """Current export status and its message."""

    status: ExportStatus = ExportStatus.IDLE
    message: str = ""


class ExportService:
    """Runs PDF exports and tracks their outcome."""

    def __init__(
        self,
        ledger: LedgerStore,
        report_service: ReportService,
        pdf_service: "PDFService",
        output_dir: Path,
        reset_seconds: float = 3.0,
    ) -> None:
        """
        Initialize export service.

        Args:
            ledger: Ledger to snapshot
            report_service: Builds analysis reports
            pdf_service: Renders PDFs
            output_dir: Directory for exported files
            reset_seconds: Delay before a success/error status returns to idle
        """
        self.ledger = ledger
        self.report_service = report_service
        self.pdf_service = pdf_service
        self.output_dir = Path(output_dir)
        self.reset_seconds = reset_seconds
        self.logger = get_logger("export_service")

        self._state = ExportState()
        self._lock = threading.Lock()
        self._reset_timer: Optional[threading.Timer] = None
        self._generation = 0

    @property
    def state(self) -> ExportState:
        with self._lock:
            return self._state

    @property
    def status(self) -> ExportStatus:
        return self.state.status

    def _set_state(self, status: ExportStatus, message: str) -> None:
        with self._lock:
            if self._reset_timer is not None:
                self._reset_timer.cancel()
            self._generation += 1
            self._state = ExportState(status=status, message=message)
            self._reset_timer = threading.Timer(
                self.reset_seconds, self._reset, args=(self._generation,)
            )
            self._reset_timer.daemon = True
            self._reset_timer.start()

    def _reset(self, generation: int) -> None:
        with self._lock:
            # A newer status replaced the one this timer was started for
            if generation != self._generation:
                return
            self._state = ExportState()
            self._reset_timer = None

    def close(self) -> None:
        """Cancel a pending status reset."""
        with self._lock:
            if self._reset_timer is not None:
                self._reset_timer.cancel()
                self._reset_timer = None

    def export_report(
        self,
        report_type: Union[ReportType, str],
        time_range: Union[TimeRange, str] = TimeRange.LAST_30_DAYS,
        now: Optional[datetime] = None,
    ) -> Optional[Path]:
        """
        Export an inventory or shipment analysis report.

        Args:
            report_type: inventory or shipment
            time_range: Report window token
            now: Reference time for the window

        Returns:
            Path of the PDF, or None if the export failed (see status)
        """
        report_type = ReportType(report_type)
        snapshot = self.ledger.snapshot()

        try:
            if report_type == ReportType.INVENTORY and not snapshot.products:
                raise ReportExportError("No products available to export")
            if report_type == ReportType.SHIPMENT and not snapshot.shipments:
                raise ReportExportError("No shipments available to export")

            report = self.report_service.build_report(
                report_type,
                time_range,
                snapshot.products,
                snapshot.logs,
                snapshot.shipments,
                now=now,
            )
            path = self.pdf_service.generate_report(report, self.output_dir)
        except ReportExportError as e:
            self.logger.exception(f"{report_type.value.title()} report export failed")
            self._set_state(ExportStatus.ERROR, e.message)
            return None

        self._set_state(
            ExportStatus.SUCCESS,
            f"{report_type.value.title()} report exported to {path}",
        )
        return path

    def export_daily_report(self, today: Optional[date] = None) -> Optional[Path]:
        """
        Export today's combined activity.

        Returns:
            Path of the PDF, or None if the export failed (see status)
        """
        today = today or date.today()
        snapshot = self.ledger.snapshot()
        entries = combined_daily_logs(snapshot.logs, snapshot.shipment_logs, today)

        try:
            if not entries:
                raise ReportExportError("No activities recorded today to export")
            path = self.pdf_service.generate_daily_report(entries, self.output_dir, today)
        except ReportExportError as e:
            self.logger.exception("Daily report export failed")
            self._set_state(ExportStatus.ERROR, e.message)
            return None

        self._set_state(ExportStatus.SUCCESS, f"Daily report exported to {path}")
        return path
