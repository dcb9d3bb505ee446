# schedule_api/extraction/__init__.py
"""
Screenshot extraction & course reconciliation package.

Public API:
- extract_sections(text: str) -> list[SectionExtraction]
- recognize_file(file_path, filename, lang, recognizer) -> Optional[str]
- run_upload(files, store, context) -> UploadSummary
"""

from .ocr import recognize_file
from .pipeline import run_upload
from .section_parser import extract_sections

__all__ = ["extract_sections", "recognize_file", "run_upload"]
