"""
Test sample listing
"""

import pytest

from api.samples.services import get_samples
from core.mosaic import MosaicAPIError


def test_get_samples(mock_client):
    mock_client.samples = [{"id": 1, "name": "NA12878"}, {"id": 2, "extra": True}]

    samples = get_samples(mock_client, "42")

    assert [s.id for s in samples] == [1, 2]
    assert samples[0].name == "NA12878"
    assert mock_client.calls == [("GET", "/projects/42/samples", None)]


def test_get_samples_empty_project(mock_client):
    assert get_samples(mock_client, "42") == []


def test_get_samples_error(mock_client):
    mock_client.failing_urls.add("/projects/42/samples")
    with pytest.raises(MosaicAPIError):
        get_samples(mock_client, "42")
