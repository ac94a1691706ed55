"""Dataflow job checks: existence and post-destroy state."""

from __future__ import annotations

from typing import Any

from loguru import logger

from flexcheck.core.exceptions import JobStillActiveError, TransportError

log = logger.bind(component="dataflow")

TERMINAL_STATES = frozenset({
    "JOB_STATE_DONE",
    "JOB_STATE_FAILED",
    "JOB_STATE_CANCELLED",
    "JOB_STATE_UPDATED",
    "JOB_STATE_DRAINED",
})

# Jobs deleted with on_delete = "cancel" or "drain" may still be winding down.
TERMINATING_STATES = frozenset({
    "JOB_STATE_CANCELLING",
    "JOB_STATE_DRAINING",
})


def state_name(state: object) -> str:
    """Normalize a ``JobState`` enum or raw string to its name."""
    return getattr(state, "name", None) or str(state)


def is_terminal(state: object, *, include_terminating: bool = True) -> bool:
    name = state_name(state)
    if name in TERMINAL_STATES:
        return True
    return include_terminating and name in TERMINATING_STATES


def get_job(client: Any, project: str, region: str, job_id: str) -> Any:
    """Fetch a Dataflow job summary.

    Raises:
        google.api_core.exceptions.NotFound: If the job does not exist.
        TransportError: For any other API failure.
    """
    from google.api_core.exceptions import GoogleAPIError, NotFound  # type: ignore[reportMissingImports]
    from google.cloud import dataflow_v1beta3  # type: ignore[reportMissingImports]

    request = dataflow_v1beta3.GetJobRequest(
        project_id=project,
        job_id=job_id,
        location=region,
        view=dataflow_v1beta3.JobView.JOB_VIEW_SUMMARY,
    )
    try:
        job = client.get_job(request=request)
    except NotFound:
        raise
    except GoogleAPIError as e:
        raise TransportError("get dataflow job", e) from e

    log.debug(
        "Job {job} is {state}", job=job_id, state=state_name(job.current_state),
    )
    return job


def assert_job_destroyed(client: Any, project: str, region: str, job_id: str) -> None:
    """Check that a job is gone or has reached a terminal state.

    Raises:
        JobStillActiveError: If the job is still running.
        TransportError: If the API call fails for another reason.
    """
    from google.api_core.exceptions import NotFound  # type: ignore[reportMissingImports]

    try:
        job = get_job(client, project, region, job_id)
    except NotFound:
        log.debug("Job {job} no longer exists", job=job_id)
        return

    if not is_terminal(job.current_state):
        raise JobStillActiveError(job_id, state_name(job.current_state))
