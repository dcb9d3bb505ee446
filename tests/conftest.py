import os
import tempfile

# must be set before schedule_api.config / main are imported
_TMP = tempfile.mkdtemp(prefix="schedule_api_tests_")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["WORKFLOW_LOG_DIR"] = os.path.join(_TMP, "logs")
