import io
import json
import os
import unittest
from contextlib import redirect_stdout
from datetime import date

from schedule_api import workflow_logger
from schedule_api.workflow_logger import format_event, log_event


class TestWorkflowLogger(unittest.TestCase):
    def test_format_event(self) -> None:
        line = format_event(
            batch_id="b-1",
            status="running",
            actor="system",
            event="OcrCompleted",
            extra={"filename": "week1.png", "start": date(2025, 1, 6)},
        )

        ts, batch, status, actor, event, payload = line.split(" | ")
        self.assertTrue(ts.endswith("+00:00"))
        self.assertEqual((batch, status, actor, event), ("batch_id=b-1", "status=running", "actor=system", "OcrCompleted"))
        self.assertEqual(json.loads(payload[len("json="):]), {"filename": "week1.png", "start": "2025-01-06"})

    def test_event_goes_to_stdout_and_run_file(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            log_event(batch_id="b-2", status="completed", actor="system", event="UploadCompleted")

        self.assertIn("batch_id=b-2", out.getvalue())
        path = workflow_logger._get_log_path()
        self.assertEqual(str(path.parent), os.environ["WORKFLOW_LOG_DIR"])
        self.assertTrue(path.name.startswith("run_"))
        with path.open(encoding="utf-8") as f:
            last = f.read().splitlines()[-1]
        self.assertIn("UploadCompleted | json={}", last)


if __name__ == "__main__":
    unittest.main()
