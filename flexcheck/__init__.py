"""flexcheck - acceptance checks for Dataflow flex template jobs.

Example:

    from flexcheck import GCP, RESOURCE_ADDRESS, ScenarioNames, TestCase, TestStep, Terraform, run
    from flexcheck import job_exists, job_has_service_account, service_account_config

    names = ScenarioNames.generate()
    gcp = GCP(zone="us-central1-b")

    run(
        TestCase(steps=[
            TestStep(
                config=service_account_config(names.bucket, names.job, names.account_id, gcp.zone),
                checks=[
                    job_exists(RESOURCE_ADDRESS, gcp),
                    job_has_service_account(RESOURCE_ADDRESS, names.account_id, gcp.zone, gcp),
                ],
            ),
        ]),
        Terraform(workdir),
    )
"""

from flexcheck.config import Settings, load_settings
from flexcheck.core.exceptions import (
    AmbiguousMatchError,
    CheckFailedError,
    ConfigurationError,
    FlexcheckError,
    InstanceLookupError,
    InvalidInstanceError,
    JobStillActiveError,
    LookupTimeoutError,
    ServiceAccountMismatchError,
    StateError,
    StructuralError,
    TerraformError,
    TransportError,
    VerificationError,
)
from flexcheck.harness import (
    RESOURCE_ADDRESS,
    ScenarioNames,
    State,
    Terraform,
    TerraformSettings,
    TestCase,
    TestStep,
    acceptance_enabled,
    basic_config,
    compose_checks,
    job_destroyed,
    job_exists,
    job_has_service_account,
    run,
    service_account_config,
)
from flexcheck.logging import LogConfig, setup_logging, teardown_logging
from flexcheck.providers.gcp import (
    GCP,
    find_instance_for_job,
    lookup_job_instance,
    verify_service_account,
)

__all__ = [
    "GCP",
    "RESOURCE_ADDRESS",
    "AmbiguousMatchError",
    "CheckFailedError",
    "ConfigurationError",
    "FlexcheckError",
    "InstanceLookupError",
    "InvalidInstanceError",
    "JobStillActiveError",
    "LogConfig",
    "LookupTimeoutError",
    "ScenarioNames",
    "ServiceAccountMismatchError",
    "Settings",
    "State",
    "StateError",
    "StructuralError",
    "Terraform",
    "TerraformError",
    "TerraformSettings",
    "TestCase",
    "TestStep",
    "TransportError",
    "VerificationError",
    "acceptance_enabled",
    "basic_config",
    "compose_checks",
    "find_instance_for_job",
    "job_destroyed",
    "job_exists",
    "job_has_service_account",
    "load_settings",
    "lookup_job_instance",
    "run",
    "service_account_config",
    "setup_logging",
    "teardown_logging",
    "verify_service_account",
]
