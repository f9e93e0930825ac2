"""
PDF report rendering for InventoryPro.
"""

from .pdf_service import NumberedCanvas, PDFService, ReportDocument

__all__ = [
    "PDFService",
    "ReportDocument",
    "NumberedCanvas",
]
