"""Apply / check / destroy driver for acceptance scenarios.

A :class:`TestCase` is a list of steps, each a full configuration plus the
checks to run against the state it produces. :func:`run` applies the steps
in order and always destroys what was created, then runs the destroy check
against the last state seen before the destroy.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from flexcheck.core.exceptions import CheckFailedError, FlexcheckError
from flexcheck.harness.state import State
from flexcheck.harness.terraform import Terraform

log = logger.bind(component="harness")

type Check = Callable[[State], None]


def compose_checks(*checks: Check) -> Check:
    """Chain checks into one, stopping at the first failure."""

    def composed(state: State) -> None:
        for index, check in enumerate(checks, 1):
            try:
                check(state)
            except Exception as e:
                e.add_note(f"check {index}/{len(checks)}")
                raise

    return composed


@dataclass(frozen=True, slots=True)
class TestStep:
    """One configuration to apply and the checks to run afterwards."""

    __test__ = False

    config: str
    checks: Sequence[Check] = ()

    def check(self, state: State) -> None:
        compose_checks(*self.checks)(state)


@dataclass(frozen=True, slots=True)
class TestCase:
    """A sequence of steps sharing one working directory.

    Args:
        steps: Steps to apply in order.
        pre_check: Called before anything runs; raise to abort.
        check_destroy: Called with the pre-destroy state once destroy finished.
    """

    __test__ = False

    steps: Sequence[TestStep]
    pre_check: Callable[[], None] | None = None
    check_destroy: Check | None = None


def acceptance_enabled() -> bool:
    """Acceptance scenarios hit real cloud APIs and only run when TF_ACC is set."""
    return bool(os.environ.get("TF_ACC"))


def run(case: TestCase, terraform: Terraform) -> State:
    """Run every step of a case, then destroy.

    Returns:
        The state after the last step.

    Raises:
        CheckFailedError: If a step check or the destroy check fails.
        TerraformError: If a terraform subcommand fails.
    """
    if not case.steps:
        raise ValueError("TestCase needs at least one step")

    if case.pre_check is not None:
        case.pre_check()

    last = State()
    initialized = False
    error: BaseException | None = None

    try:
        for index, step in enumerate(case.steps, 1):
            log.info("Step {i}/{n}", i=index, n=len(case.steps))
            terraform.write_config(step.config)
            if not initialized:
                terraform.init()
                initialized = True
            terraform.apply()
            last = State.from_show_json(terraform.show_state())
            try:
                step.check(last)
            except FlexcheckError as e:
                raise CheckFailedError(index, e) from e
    except BaseException as e:
        error = e

    if initialized:
        try:
            _destroy(case, terraform, last)
        except Exception as destroy_error:
            if error is None:
                raise
            log.error("Destroy after failed step also failed: {err}", err=destroy_error)
            error.add_note(f"destroy also failed: {destroy_error}")

    if error is not None:
        raise error
    return last


def _destroy(case: TestCase, terraform: Terraform, last: State) -> None:
    try:
        pre_destroy = State.from_show_json(terraform.show_state())
    except Exception as e:
        log.warning("Reading state before destroy failed, using last step state: {err}", err=e)
        pre_destroy = last
    terraform.destroy()
    if case.check_destroy is None:
        return
    try:
        case.check_destroy(pre_destroy)
    except FlexcheckError as e:
        raise CheckFailedError(None, e) from e
