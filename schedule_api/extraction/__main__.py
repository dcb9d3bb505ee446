"""
Package CLI entrypoint for extraction tooling.

Usage:
  python -m schedule_api.extraction parse <screenshot> [<screenshot> ...]
  python -m schedule_api.extraction import <screenshot> [<screenshot> ...]

`parse` prints the extracted sections as JSON and never touches the database.
`import` runs the full upload pipeline against DATABASE_URL.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from schedule_api import config
from schedule_api.errors import ScheduleError
from schedule_api.extraction.ocr import Recognizer, recognize_file, tesseract_recognize
from schedule_api.extraction.pipeline import run_upload
from schedule_api.extraction.section_parser import extract_sections
from schedule_api.models import Base
from schedule_api.repository import CourseRepository


def _parse(paths: List[str], lang: str, recognizer: Recognizer) -> int:
    out = []
    for p in paths:
        text = recognize_file(p, Path(p).name, lang=lang, recognizer=recognizer)
        for ex in extract_sections(text):
            out.append(
                {
                    "file": Path(p).name,
                    "section": ex.section.model_dump(mode="json"),
                    "degradedFields": ex.degraded_fields,
                    "lectureTypeDivergent": ex.lecture_type_divergent,
                }
            )
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


def _import(paths: List[str], lang: str, recognizer: Recognizer) -> int:
    engine = create_engine(config.DATABASE_URL, future=True)
    Base.metadata.create_all(bind=engine)

    with Session(engine) as db:
        summary = run_upload(
            [(p, Path(p).name) for p in paths],
            CourseRepository(db),
            config.upload_context_from_env(),
            lang=lang,
            recognizer=recognizer,
        )
    print(f"[extraction-cli] completed batch_id={summary.batchId}")
    print(json.dumps(summary.model_dump(), indent=2))
    return 0


def main(argv: list[str] | None = None, recognizer: Optional[Recognizer] = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m schedule_api.extraction")
    parser.add_argument("--lang", default=config.OCR_LANG, help="OCR language hint (default: %(default)s)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_parse = sub.add_parser("parse", help="OCR screenshots and print the extracted sections")
    p_parse.add_argument("files", nargs="+", help="screenshot image or PDF paths")

    p_import = sub.add_parser("import", help="OCR screenshots and create/update courses in the database")
    p_import.add_argument("files", nargs="+", help="screenshot image or PDF paths")

    args = parser.parse_args(argv)
    recognizer = recognizer or tesseract_recognize

    try:
        if args.cmd == "parse":
            return _parse(args.files, args.lang, recognizer)
        if args.cmd == "import":
            return _import(args.files, args.lang, recognizer)
    except ScheduleError as e:
        print(f"[extraction-cli] ❌ {e.code}: {e.message}", file=sys.stderr)
        return 2

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
