import unittest
from types import SimpleNamespace
from unittest.mock import Mock

from schedule_api.errors import MultipleRecordsError, OcrError
from schedule_api.extraction.contracts import UploadContext
from schedule_api.extraction.pipeline import extract_files, run_upload

# raw tesseract output for one screenshot holding two sections of the same course
RAW_SCREENSHOT = """Course Search
COMP-3018-FTE01 Add Section to Schedule
Back-End Development
Runs from 2025-01-06 - 2025-04-25
Seats @) Times Locations Instructors
4/35/0 T12:00 PM - 3:00 PM Roblin Centre (Prev. PSC), Shabaga, D (Lecture, Online)
Princess Building PSCP312
2025-01-06 - 2025-04-25
Lecture
W 1:00 PM - 4:00 PM Roblin Centre (Prev. PSC)
2025-01-06 - 2025-04-25 Online
COMP-3018-FTE02 Add Section to Schedule
Back-End Development
Runs from 2025-01-06 - 2025-04-25
Seats ® Times Locations Instructors
0/35/0 Roblin Centre (Prev. PSC), Bialowas, M (Lecture,
M 8:00 AM -11:00 AM Innovation Centre INNE239 Online)
2025-01-06 - 2025-04-25
Lecture
Th 2:00 PM - 5:00 PM Roblin Centre (Prev. PSC)
2025-01-06 - 2025-04-25 Online
"""

GARBLED_SCREENSHOT = "MATH-1103-A1 Add Section to Schedule\n???\n"

CONTEXT = UploadContext(program="Application Design and Delivery", term=3, courseType="Required", userId="admin")


def fake_recognizer(texts):
    def recognize(path: str, lang: str) -> str:
        return texts[path]

    return recognize


class TestExtractFiles(unittest.TestCase):
    def test_sections_from_every_file_in_order(self) -> None:
        recognizer = fake_recognizer({"/a.png": RAW_SCREENSHOT, "/b.png": ""})
        found = extract_files([("/a.png", "a.png"), ("/b.png", "b.png")], "batch-1", recognizer=recognizer)

        self.assertEqual([ex.section.sectionCode for ex in found], ["COMP-3018-FTE01", "COMP-3018-FTE02"])

    def test_ocr_failure_stops_the_batch(self) -> None:
        calls = []

        def recognizer(path: str, lang: str) -> str:
            calls.append(path)
            raise RuntimeError("boom")

        with self.assertRaises(OcrError):
            extract_files([("/a.png", "a.png"), ("/b.png", "b.png")], "batch-1", recognizer=recognizer)
        self.assertEqual(calls, ["/a.png"])


class TestRunUpload(unittest.TestCase):
    def setUp(self) -> None:
        self.store = Mock()
        self.store.query.return_value = []
        self.store.create.return_value = SimpleNamespace(id="course-1")

    def test_new_course_is_created_with_all_sections(self) -> None:
        summary = run_upload(
            [("/a.png", "a.png")],
            self.store,
            CONTEXT,
            batch_id="batch-1",
            recognizer=fake_recognizer({"/a.png": RAW_SCREENSHOT}),
        )

        self.assertEqual(summary.batchId, "batch-1")
        self.assertEqual(summary.filesProcessed, 1)
        self.assertEqual(summary.sectionsExtracted, 2)
        self.assertEqual(summary.sectionsDropped, 0)
        self.assertEqual(summary.coursesCreated, ["course-1"])
        self.assertEqual(summary.coursesUpdated, [])

        (draft,), _ = self.store.create.call_args
        self.assertEqual(draft.courseCode, "COMP-3018")
        self.assertEqual(draft.courseName, "Back-End Development")
        self.assertEqual(
            [s.sectionCode for s in draft.courseSections],
            ["COMP-3018-FTE01", "COMP-3018-FTE02"],
        )

    def test_existing_course_is_updated(self) -> None:
        self.store.query.return_value = [SimpleNamespace(id="course-9", userId="admin")]
        self.store.update.return_value = SimpleNamespace(id="course-9")

        summary = run_upload(
            [("/a.png", "a.png")],
            self.store,
            CONTEXT,
            recognizer=fake_recognizer({"/a.png": RAW_SCREENSHOT}),
        )

        self.assertEqual(summary.coursesUpdated, ["course-9"])
        self.store.create.assert_not_called()
        self.assertTrue(summary.batchId)

    def test_unusable_sections_are_counted_not_stored(self) -> None:
        summary = run_upload(
            [("/g.png", "g.png")],
            self.store,
            CONTEXT,
            recognizer=fake_recognizer({"/g.png": GARBLED_SCREENSHOT}),
        )

        self.assertEqual(summary.sectionsExtracted, 1)
        self.assertEqual(summary.sectionsDegraded, 1)
        self.assertEqual(summary.sectionsDropped, 1)
        self.store.query.assert_not_called()
        self.store.create.assert_not_called()

    def test_ocr_failure_touches_no_store(self) -> None:
        def broken(path: str, lang: str) -> str:
            raise RuntimeError("boom")

        with self.assertRaises(OcrError):
            run_upload([("/a.png", "a.png")], self.store, CONTEXT, recognizer=broken)
        self.store.query.assert_not_called()

    def test_conflict_propagates(self) -> None:
        self.store.query.return_value = [
            SimpleNamespace(id="c1", userId="admin"),
            SimpleNamespace(id="c2", userId="admin"),
        ]

        with self.assertRaises(MultipleRecordsError):
            run_upload(
                [("/a.png", "a.png")],
                self.store,
                CONTEXT,
                recognizer=fake_recognizer({"/a.png": RAW_SCREENSHOT}),
            )
        self.store.create.assert_not_called()
        self.store.update.assert_not_called()


if __name__ == "__main__":
    unittest.main()
