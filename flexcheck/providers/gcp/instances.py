"""Inspection helpers for Compute Engine instances spawned by Dataflow.

Dataflow tags every worker VM with the id of the job it runs, so a job's
workers can be found with a label filter and then checked attribute by
attribute.
"""

from __future__ import annotations

from loguru import logger

from flexcheck.core.exceptions import ServiceAccountMismatchError, StructuralError

log = logger.bind(component="gcp")

JOB_ID_LABEL = "goog-dataflow-job-id"


def label_filter(job_id: str) -> str:
    """Build the listing filter that selects the workers of a job.

    Parameters
    ----------
    job_id
        Dataflow job id, as stored in the resource's primary id.

    Returns
    -------
    str
        Compute Engine filter expression.
    """
    return f"labels.{JOB_ID_LABEL} = {job_id}"


def account_id(email: str) -> str:
    """Return the short account id: everything before the first ``@``."""
    return email.split("@", 1)[0]


def service_account_emails(instance: object) -> list[str]:
    """Extract the service account emails attached to an instance."""
    accounts = getattr(instance, "service_accounts", None) or []
    return [getattr(sa, "email", "") for sa in accounts]


def verify_service_account(
    instance: object, expected_id: str, *, resource: str | None = None,
) -> None:
    """Check that an instance runs as the expected service account.

    Parameters
    ----------
    instance
        Compute Engine instance (``compute_v1.Instance`` or lookalike).
    expected_id
        Short account id expected before the ``@`` of the email.
    resource
        Name used in error messages. Defaults to the instance name.

    Raises
    ------
    StructuralError
        If the instance does not carry exactly one service account.
    ServiceAccountMismatchError
        If the account id differs from ``expected_id``.
    """
    name = resource or getattr(instance, "name", "") or "<unknown>"
    emails = service_account_emails(instance)

    if len(emails) != 1:
        raise StructuralError(len(emails), name)

    email = emails[0]
    if account_id(email) != expected_id:
        log.warning(
            "Service account mismatch on {name}: expected {expected}, got {email}",
            name=name, expected=expected_id, email=email,
        )
        raise ServiceAccountMismatchError(expected_id, email)

    log.debug("Instance {name} runs as {email}", name=name, email=email)
