"""
Tests for PDF rendering and the export service status.
"""

import re
import sys
import time
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from inventory_pro.exceptions import ReportExportError
from inventory_pro.reports import PDFService
from inventory_pro.services import ExportService, ExportStatus, LedgerStore, ReportService
from inventory_pro.services.report_service import combined_daily_logs


@pytest.fixture
def exporter(ledger, tmp_path):
    service = ExportService(
        ledger=ledger,
        report_service=ReportService(),
        pdf_service=PDFService(),
        output_dir=tmp_path / "reports",
        reset_seconds=0.5,
    )
    yield service
    service.close()


def test_daily_report_pdf(ledger, tmp_path):
    ledger.update_stock("p2", 50, "add", "Restock", new_price=160, new_supplier="Nike Direct")
    ledger.add_to_shipment("p1", 2, 10, 5)
    entries = combined_daily_logs(ledger.logs, ledger.shipment_logs)

    path = PDFService().generate_daily_report(entries, tmp_path, date(2024, 1, 15))

    assert path.name == "inventory-daily-report-2024-01-15.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_daily_report_spans_pages(ledger, tmp_path):
    for stock in range(60):
        ledger.update_stock("p2", stock, "set", f"Count {stock}")
    entries = combined_daily_logs(ledger.logs, ledger.shipment_logs)

    path = PDFService().generate_daily_report(entries, tmp_path)

    pages = re.findall(rb"/Type\s*/Page\b", path.read_bytes())
    assert len(pages) >= 2


def test_pdf_failure_raises_export_error(ledger, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")

    with pytest.raises(ReportExportError):
        PDFService().generate_daily_report([], blocker)


def test_export_inventory_report(exporter):
    path = exporter.export_report("inventory", "30d")

    assert path is not None
    assert path.exists()
    assert path.name.startswith("inventory-report-last-30-days-")
    assert exporter.status == ExportStatus.SUCCESS
    assert "Inventory report exported" in exporter.state.message


def test_export_shipment_report(exporter, ledger):
    ledger.add_to_shipment("p1", 2, 10, 5)
    ledger.add_to_shipment("p2", 3, 5, 18)

    path = exporter.export_report("shipment", "1y")

    assert path.name.startswith("shipment-report-last-year-")
    assert exporter.status == ExportStatus.SUCCESS


def test_export_shipment_report_without_shipments(exporter):
    assert exporter.export_report("shipment") is None
    assert exporter.status == ExportStatus.ERROR
    assert exporter.state.message == "No shipments available to export"


def test_export_inventory_report_without_products(tmp_path):
    exporter = ExportService(LedgerStore(), ReportService(), PDFService(), tmp_path, reset_seconds=5)

    assert exporter.export_report("inventory") is None
    assert exporter.state.message == "No products available to export"
    exporter.close()


def test_export_daily_report_without_activity(exporter):
    assert exporter.export_daily_report() is None
    assert exporter.status == ExportStatus.ERROR


def test_export_daily_report(exporter, ledger):
    ledger.update_stock("p3", 25, "remove")

    path = exporter.export_daily_report()

    assert path.exists()
    assert exporter.status == ExportStatus.SUCCESS


def test_status_resets_to_idle(exporter):
    exporter.export_report("shipment")
    assert exporter.status == ExportStatus.ERROR

    deadline = time.monotonic() + 5
    while exporter.status != ExportStatus.IDLE and time.monotonic() < deadline:
        time.sleep(0.05)

    assert exporter.status == ExportStatus.IDLE
    assert exporter.state.message == ""
