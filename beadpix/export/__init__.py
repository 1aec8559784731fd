"""Export helpers for bead sheets."""

from .csv_exporter import export_csv, export_usage_csv
from .json_exporter import export_json
from .pdf_exporter import export_pdf
from .png_exporter import export_png

__all__ = [
    "export_csv",
    "export_json",
    "export_pdf",
    "export_png",
    "export_usage_csv",
]
