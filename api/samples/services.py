from typing import List

from api.samples.models import Sample
from core.mosaic import MosaicClient

def get_samples(client: MosaicClient, project_id: str) -> List[Sample]:
    """
    Get all samples of a project.

    Args:
        client: Mosaic API client
        project_id: Project to list samples for

    Returns:
        List of Sample objects
    """
    body = client.get(f"/projects/{project_id}/samples")
    return [Sample.model_validate(sample) for sample in body or []]
