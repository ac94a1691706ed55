from __future__ import annotations

from pathlib import Path

import pytest

from flexcheck.config import Settings, load_settings
from flexcheck.harness.terraform import Terraform
from flexcheck.logging import LogConfig, setup_logging, teardown_logging


@pytest.fixture(scope="session")
def settings() -> Settings:
    return load_settings()


@pytest.fixture(scope="session", autouse=True)
def acceptance_logging(settings: Settings):
    ids = setup_logging(settings.logging or LogConfig())
    yield
    teardown_logging(ids)


@pytest.fixture
def terraform(tmp_path: Path, settings: Settings) -> Terraform:
    return Terraform(tmp_path / "terraform", settings.terraform)
