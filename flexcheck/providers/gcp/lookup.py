"""Bounded polling lookup of the worker instance behind a Dataflow job.

Worker VMs appear in the Compute Engine listing some time after the job is
submitted, so an empty listing is retried on a fixed interval until the
deadline. Every other outcome ends the lookup at once:

    Polling -> Found | Ambiguous | TransportError | TimedOut
"""

from __future__ import annotations

from itertools import islice
from typing import Any

from loguru import logger
from tenacity import (
    RetryCallState,
    RetryError,
    retry,
    retry_if_exception_type,
    stop_before_delay,
    wait_fixed,
)

from flexcheck.core.exceptions import (
    AmbiguousMatchError,
    InvalidInstanceError,
    LookupTimeoutError,
    TransportError,
)
from flexcheck.providers.gcp.config import GCP, instances_client
from flexcheck.providers.gcp.instances import label_filter

log = logger.bind(component="lookup")


class InstanceNotVisibleError(Exception):
    """No instance matches yet - retry."""


def _log_retry(state: RetryCallState) -> None:
    log.debug(
        "No worker instance yet (attempt {n}, {elapsed:.1f}s elapsed)",
        n=state.attempt_number, elapsed=state.seconds_since_start or 0.0,
    )


def find_instance_for_job(
    client: Any,
    project: str,
    job_id: str,
    zone: str,
    *,
    timeout: float = 60.0,
    interval: float = 5.0,
    max_results: int = 2,
) -> Any:
    """Wait for the single Compute Engine instance labelled with a job id.

    Args:
        client: ``compute_v1.InstancesClient`` (or anything with a
            compatible ``list(request=...)``).
        project: Project the workers run in.
        job_id: Dataflow job id; matched against ``goog-dataflow-job-id``.
        zone: Zone to list.
        timeout: Overall deadline in seconds.
        interval: Fixed delay between listings in seconds.
        max_results: Result cap per listing call.

    Returns:
        The matching ``compute_v1.Instance``.

    Raises:
        ValueError: If job_id is empty.
        TransportError: If the listing call fails.
        AmbiguousMatchError: If more than one instance matches.
        InvalidInstanceError: If the listing yields an empty entry.
        LookupTimeoutError: If nothing matches before the deadline.
    """
    if not job_id:
        raise ValueError("job_id must not be empty")

    from google.api_core.exceptions import GoogleAPIError  # type: ignore[reportMissingImports]
    from google.auth.exceptions import GoogleAuthError  # type: ignore[reportMissingImports]
    from google.cloud import compute_v1  # type: ignore[reportMissingImports]

    request = compute_v1.ListInstancesRequest(
        project=project,
        zone=zone,
        filter=label_filter(job_id),
        max_results=max_results,
    )

    @retry(
        stop=stop_before_delay(timeout),
        wait=wait_fixed(interval),
        retry=retry_if_exception_type(InstanceNotVisibleError),
        before_sleep=_log_retry,
    )
    def _poll() -> Any:
        # OSError covers connection failures raised by the REST transport.
        try:
            items = list(islice(client.list(request=request), max_results))
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            log.warning("Listing instances for job {job} failed: {err}", job=job_id, err=e)
            raise TransportError("list instances", e) from e

        match items:
            case []:
                raise InstanceNotVisibleError(job_id)
            case [None]:
                raise InvalidInstanceError(job_id)
            case [instance]:
                return instance
            case _:
                raise AmbiguousMatchError(job_id, len(items))

    log.debug(
        "Looking up worker instance for job {job} in {project}/{zone}",
        job=job_id, project=project, zone=zone,
    )
    try:
        instance = _poll()
    except RetryError as e:
        log.warning("No worker instance for job {job} after {t:.1f}s", job=job_id, t=timeout)
        raise LookupTimeoutError(job_id, timeout) from e

    log.info("Found worker instance {name} for job {job}", name=instance.name, job=job_id)
    return instance


def lookup_job_instance(
    config: GCP,
    job_id: str,
    *,
    zone: str | None = None,
    client: Any = None,
) -> Any:
    """Run :func:`find_instance_for_job` with settings taken from a GCP config."""
    return find_instance_for_job(
        client if client is not None else instances_client(),
        config.resolved_project,
        job_id,
        zone or config.zone,
        timeout=config.lookup_timeout,
        interval=config.poll_interval,
        max_results=config.max_results,
    )
