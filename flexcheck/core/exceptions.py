"""Custom exception hierarchy for flexcheck.

All flexcheck-specific exceptions inherit from FlexcheckError, enabling
callers to catch every failure of a check with a single except clause.
"""

from __future__ import annotations


class FlexcheckError(Exception):
    """Base exception for all flexcheck errors."""


class ConfigurationError(FlexcheckError):
    """Raised for invalid configuration or missing required settings."""


# =============================================================================
# Instance lookup
# =============================================================================


class InstanceLookupError(FlexcheckError):
    """Raised when the worker instance of a job cannot be resolved."""


class TransportError(InstanceLookupError):
    """Raised when a cloud API call itself failed - do not retry."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class AmbiguousMatchError(InstanceLookupError):
    """Raised when more than one instance matches the job label."""

    def __init__(self, job_id: str, count: int) -> None:
        self.job_id = job_id
        self.count = count
        super().__init__(
            f"Wrong number of matching instances for dataflow job: {job_id}, {count}"
        )


class LookupTimeoutError(InstanceLookupError):
    """Raised when no instance shows up before the deadline."""

    def __init__(self, job_id: str, timeout: float) -> None:
        self.job_id = job_id
        self.timeout = timeout
        super().__init__(
            f"no instance found for dataflow job {job_id!r} after {timeout:.1f}s"
        )


class InvalidInstanceError(InstanceLookupError):
    """Raised when the listing returned an empty instance entry."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"invalid instance for dataflow job {job_id!r}")


# =============================================================================
# Verification
# =============================================================================


class VerificationError(FlexcheckError):
    """Raised when a fetched resource does not look as expected."""


class StructuralError(VerificationError):
    """Raised when an instance does not carry exactly one service account."""

    def __init__(self, count: int, resource: str) -> None:
        self.count = count
        self.resource = resource
        super().__init__(
            f"Found multiple service accounts ({count}) for dataflow job "
            f"{resource!r}, expected 1"
        )


class ServiceAccountMismatchError(VerificationError):
    """Raised when the instance service account is not the expected one."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"service account mismatch, expected account ID = {expected!r}, "
            f"actual email = {actual!r}"
        )


class JobStillActiveError(VerificationError):
    """Raised when a job outlives the destroy of its resource."""

    def __init__(self, job_id: str, state: str) -> None:
        self.job_id = job_id
        self.state = state
        super().__init__(f"dataflow job {job_id!r} still present in state {state}")


# =============================================================================
# Harness
# =============================================================================


class TerraformError(FlexcheckError):
    """Raised when a terraform subcommand exits non-zero."""

    def __init__(self, command: str, returncode: int, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        message = f"terraform {command} failed (rc={returncode})"
        if output:
            message = f"{message}: {output}"
        super().__init__(message)


class StateError(FlexcheckError):
    """Raised when the Terraform state lacks an expected resource or id."""


class CheckFailedError(FlexcheckError):
    """Raised when a step check fails."""

    def __init__(self, step: int | None, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        where = "destroy check" if step is None else f"step {step}"
        super().__init__(f"Check failed in {where}: {cause}")
