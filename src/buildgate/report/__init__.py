# src/buildgate/report/__init__.py
from .report_md import REQUIRED_SECTIONS, generate_report_md

__all__ = ["REQUIRED_SECTIONS", "generate_report_md"]
