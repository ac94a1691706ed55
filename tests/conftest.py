from __future__ import annotations

from collections.abc import Sequence
from types import SimpleNamespace
from typing import Any

import pytest
from google.api_core.exceptions import NotFound
from google.cloud import compute_v1, dataflow_v1beta3

JOB_ID = "2024-01-01_00_00_00-1234567890"
SA_EMAIL = "tf-test-dataflow-sa1234@project.iam.gserviceaccount.com"


def make_instance(
    name: str = "big-data-worker-0",
    *,
    job_id: str = JOB_ID,
    emails: Sequence[str] = (SA_EMAIL,),
) -> compute_v1.Instance:
    return compute_v1.Instance(
        name=name,
        labels={"goog-dataflow-job-id": job_id},
        service_accounts=[compute_v1.ServiceAccount(email=e) for e in emails],
    )


class FakeInstancesClient:
    """Stands in for compute_v1.InstancesClient.

    Each list() call consumes the next response; the last one repeats.
    A response is either a list of instances or an exception to raise.
    """

    def __init__(self, *responses: list[Any] | Exception) -> None:
        self._responses = list(responses) or [[]]
        self.requests: list[compute_v1.ListInstancesRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def list(self, request: compute_v1.ListInstancesRequest) -> list[Any]:
        self.requests.append(request)
        index = min(len(self.requests), len(self._responses)) - 1
        response = self._responses[index]
        if isinstance(response, Exception):
            raise response
        return list(response)


class FakeJobsClient:
    """Stands in for dataflow_v1beta3.JobsV1Beta3Client."""

    def __init__(self, states: dict[str, dataflow_v1beta3.JobState | Exception]) -> None:
        self._states = states
        self.requests: list[dataflow_v1beta3.GetJobRequest] = []

    def get_job(self, request: dataflow_v1beta3.GetJobRequest) -> SimpleNamespace:
        self.requests.append(request)
        state = self._states.get(request.job_id)
        if state is None:
            raise NotFound(f"job {request.job_id} not found")
        if isinstance(state, Exception):
            raise state
        return SimpleNamespace(id=request.job_id, current_state=state)


def show_json(*resources: dict[str, Any]) -> dict[str, Any]:
    """Build a minimal ``terraform show -json`` payload."""
    return {
        "format_version": "1.0",
        "values": {"root_module": {"resources": list(resources)}},
    }


def resource_json(address: str, **values: Any) -> dict[str, Any]:
    rtype, name = address.split(".", 1)
    return {
        "address": address,
        "mode": "managed",
        "type": rtype,
        "name": name,
        "values": values,
    }


@pytest.fixture
def instance() -> compute_v1.Instance:
    return make_instance()


@pytest.fixture(autouse=True)
def _project_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    # Acceptance runs use the real project from the environment.
    if request.node.get_closest_marker("acceptance") is None:
        monkeypatch.setenv("GOOGLE_PROJECT", "test-project")
