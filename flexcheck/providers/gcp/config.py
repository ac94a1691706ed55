"""GCP configuration.

Immutable configuration dataclass for the Compute Engine and Dataflow
checks, plus project resolution and client factories.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from loguru import logger

from flexcheck.core.exceptions import ConfigurationError

log = logger.bind(component="gcp")

_PROJECT_ENV_VARS = ("GOOGLE_PROJECT", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT")


@dataclass(frozen=True, slots=True)
class GCP:
    """GCP configuration for acceptance checks.

    The project is auto-detected from the environment or Application
    Default Credentials if not specified.

    Example:
        >>> from flexcheck.providers.gcp import GCP
        >>> config = GCP(zone="us-central1-b")

    Args:
        project: GCP project ID. Auto-detected if None.
        region: Dataflow regional endpoint. Default: us-central1.
        zone: Compute Engine zone workers land in. Default: us-central1-b.
        lookup_timeout: Deadline in seconds for the worker instance lookup. Default: 60.
        poll_interval: Seconds between instance listings. Default: 5.
        max_results: Result cap per listing call. Default: 2.
    """

    project: str | None = None
    region: str = "us-central1"
    zone: str = "us-central1-b"
    lookup_timeout: float = 60.0
    poll_interval: float = 5.0
    max_results: int = 2

    def __post_init__(self) -> None:
        if self.lookup_timeout <= 0:
            raise ConfigurationError(f"lookup_timeout must be positive, got {self.lookup_timeout}")
        if self.poll_interval < 0:
            raise ConfigurationError(f"poll_interval must not be negative, got {self.poll_interval}")
        if self.max_results < 2:
            raise ConfigurationError(
                f"max_results must be at least 2 to detect ambiguous matches, got {self.max_results}"
            )

    @property
    def resolved_project(self) -> str:
        return resolve_project(self.project)


def resolve_project(explicit: str | None) -> str:
    """Resolve GCP project: explicit > env > ADC."""
    if explicit:
        return explicit

    for var in _PROJECT_ENV_VARS:
        if env_project := os.environ.get(var):
            return env_project

    try:
        import google.auth  # type: ignore[reportMissingImports]
        from google.auth.exceptions import DefaultCredentialsError

        _, project = google.auth.default()
    except DefaultCredentialsError as e:
        raise ConfigurationError(f"GCP project could not be resolved: {e}") from e

    if not project:
        raise ConfigurationError(
            "GCP project not set. Pass project=..., set GOOGLE_PROJECT, "
            "or configure Application Default Credentials with a quota project."
        )
    log.debug("Resolved GCP project from ADC: {project}", project=project)
    return project


def instances_client() -> Any:
    """Create a Compute Engine instances client from ADC."""
    from google.cloud import compute_v1  # type: ignore[reportMissingImports]

    return compute_v1.InstancesClient()


def jobs_client() -> Any:
    """Create a Dataflow jobs client from ADC."""
    from google.cloud import dataflow_v1beta3  # type: ignore[reportMissingImports]

    return dataflow_v1beta3.JobsV1Beta3Client()
