import pytest

from api.reconcile.models import ReconcilerConfig
from core.mosaic import ApiResponse, MosaicAPIError


class MockMosaicClient:
    """In-memory stand-in for the Mosaic API, applying PUTs to its records"""

    def __init__(self):
        self.samples = []  # [{"id": ...}]
        self.files = {}  # {sample_id: [file record dicts]}
        self.calls = []  # [(method, url, body)]
        self.failing_urls = set()  # URLs answering 500
        self.closed = False

    def add_sample(self, sample_id: int, files: list | None = None):
        self.samples.append({"id": sample_id})
        self.files[sample_id] = files or []

    def get(self, url: str):
        self.calls.append(("GET", url, None))
        self._maybe_fail("GET", url)

        parts = url.strip("/").split("/")
        if parts[-1] == "samples":
            return self.samples
        sample_id = int(parts[-2])
        return {"data": self.files.get(sample_id, [])}

    def put(self, url: str, body: dict):
        self.calls.append(("PUT", url, body))
        self._maybe_fail("PUT", url)

        parts = url.strip("/").split("/")
        sample_id, file_id = int(parts[-3]), int(parts[-1])
        for record in self.files.get(sample_id, []):
            if record["id"] == file_id:
                record.update(body)
                return record
        return {"message": "not found"}

    def close(self):
        self.closed = True

    @property
    def puts(self):
        return [call for call in self.calls if call[0] == "PUT"]

    def _maybe_fail(self, method: str, url: str):
        if url in self.failing_urls:
            raise MosaicAPIError(method, url, ApiResponse(status=500, body={"error": "boom"}))


@pytest.fixture(name="mock_client")
def mock_client_fixture():
    """Provide a mock Mosaic client for testing"""
    return MockMosaicClient()


@pytest.fixture(name="project_dir")
def project_dir_fixture(tmp_path):
    """Project directory with empty polished BAM and completed VCF directories"""
    (tmp_path / "Data" / "PolishedBams").mkdir(parents=True)
    (tmp_path / "VCF" / "Complete").mkdir(parents=True)
    return tmp_path


@pytest.fixture(name="config")
def config_fixture(project_dir):
    return ReconcilerConfig(token="test-token", project_id="42", project_dir=str(project_dir))
