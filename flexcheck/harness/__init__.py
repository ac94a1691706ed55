"""Acceptance harness: fixtures, terraform runner, state and checks."""

from __future__ import annotations

from .checks import job_destroyed, job_exists, job_has_service_account
from .fixtures import (
    RESOURCE_ADDRESS,
    ScenarioNames,
    basic_config,
    random_suffix,
    service_account_config,
)
from .state import ResourceState, State
from .terraform import Terraform, TerraformSettings
from .testcase import Check, TestCase, TestStep, acceptance_enabled, compose_checks, run

__all__ = [
    "RESOURCE_ADDRESS",
    "Check",
    "ResourceState",
    "ScenarioNames",
    "State",
    "Terraform",
    "TerraformSettings",
    "TestCase",
    "TestStep",
    "acceptance_enabled",
    "basic_config",
    "compose_checks",
    "job_destroyed",
    "job_exists",
    "job_has_service_account",
    "random_suffix",
    "run",
    "service_account_config",
]
