"""Google Cloud checks for Dataflow flex template jobs.

Worker instance lookup and service-account verification run against the
Compute Engine API; job existence and destroy checks against Dataflow.

Environment Variables:
    GOOGLE_PROJECT / GOOGLE_CLOUD_PROJECT: GCP project ID (optional with ADC)
    GOOGLE_APPLICATION_CREDENTIALS: Path to service account key (optional)
"""

from __future__ import annotations

from .config import GCP, resolve_project
from .instances import account_id, label_filter, verify_service_account
from .jobs import assert_job_destroyed, get_job, is_terminal
from .lookup import find_instance_for_job, lookup_job_instance

__all__ = [
    "GCP",
    "account_id",
    "assert_job_destroyed",
    "find_instance_for_job",
    "get_job",
    "is_terminal",
    "label_filter",
    "lookup_job_instance",
    "resolve_project",
    "verify_service_account",
]
