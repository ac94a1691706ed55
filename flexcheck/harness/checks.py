"""State checks for ``google_dataflow_flex_template_job`` scenarios."""

from __future__ import annotations

from typing import Any

from loguru import logger

from flexcheck.core.exceptions import InstanceLookupError, VerificationError
from flexcheck.harness.state import State
from flexcheck.harness.testcase import Check
from flexcheck.providers.gcp.config import GCP, jobs_client
from flexcheck.providers.gcp.instances import verify_service_account
from flexcheck.providers.gcp.jobs import assert_job_destroyed, get_job
from flexcheck.providers.gcp.lookup import lookup_job_instance

log = logger.bind(component="checks")

JOB_RESOURCE_TYPE = "google_dataflow_flex_template_job"


def _region(state: State, address: str, gcp: GCP) -> str:
    return state.resource(address).attributes.get("region") or gcp.region


def job_exists(address: str, gcp: GCP, *, client: Any = None) -> Check:
    """The resource has an id and Dataflow knows a job by that id."""

    def check(state: State) -> None:
        from google.api_core.exceptions import NotFound  # type: ignore[reportMissingImports]

        job_id = state.primary_id(address)
        try:
            get_job(
                client if client is not None else jobs_client(),
                gcp.resolved_project,
                _region(state, address, gcp),
                job_id,
            )
        except NotFound as e:
            raise VerificationError(f"dataflow job {job_id!r} for {address!r} not found") from e
        log.debug("Job {job} for {address} exists", job=job_id, address=address)

    return check


def job_has_service_account(
    address: str,
    expected_id: str,
    zone: str,
    gcp: GCP,
    *,
    client: Any = None,
) -> Check:
    """The job's worker instance runs as ``expected_id``."""

    def check(state: State) -> None:
        job_id = state.primary_id(address)
        try:
            instance = lookup_job_instance(gcp, job_id, zone=zone, client=client)
        except InstanceLookupError as e:
            e.add_note(f"Error getting dataflow job instance: {e}")
            raise
        verify_service_account(instance, expected_id, resource=address)

    return check


def job_destroyed(gcp: GCP, *, client: Any = None) -> Check:
    """Every flex template job of the pre-destroy state is gone or terminal."""

    def check(state: State) -> None:
        jobs = state.resources_of_type(JOB_RESOURCE_TYPE)
        if not jobs:
            return
        api = client if client is not None else jobs_client()
        for resource in jobs:
            if not resource.id:
                continue
            assert_job_destroyed(
                api,
                gcp.resolved_project,
                resource.attributes.get("region") or gcp.region,
                resource.id,
            )

    return check
