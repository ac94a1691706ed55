from __future__ import annotations

import json
import stat
from pathlib import Path

import pytest

from flexcheck.core.exceptions import TerraformError
from flexcheck.harness.terraform import CONFIG_FILE, Terraform, TerraformSettings
from tests.conftest import JOB_ID, resource_json, show_json

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit"), pytest.mark.timeout(30)]


def _fake_terraform(tmp_path: Path, body: str) -> str:
    script = tmp_path / "bin" / "terraform"
    script.parent.mkdir()
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(script.stat().st_mode | stat.S_IEXEC)
    return str(script)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    return tmp_path / "work"


class TestWriteConfig:
    def test_writes_main_tf(self, workdir: Path):
        tf = Terraform(workdir)
        path = tf.write_config('resource "x" "y" {}\n')
        assert path == workdir / CONFIG_FILE
        assert path.read_text() == 'resource "x" "y" {}\n'


class TestRun:
    def test_passes_flags_and_env(self, tmp_path: Path, workdir: Path):
        log_file = tmp_path / "args.log"
        binary = _fake_terraform(
            tmp_path,
            f'echo "$@ TF_IN_AUTOMATION=$TF_IN_AUTOMATION EXTRA=$EXTRA" >> {log_file}\n',
        )
        tf = Terraform(workdir, TerraformSettings(binary=binary, env={"EXTRA": "1"}))
        tf.write_config("")

        tf.init()
        tf.apply()
        tf.destroy()

        lines = log_file.read_text().splitlines()
        assert lines[0] == "init -input=false -no-color TF_IN_AUTOMATION=1 EXTRA=1"
        assert lines[1] == "apply -input=false -no-color -auto-approve TF_IN_AUTOMATION=1 EXTRA=1"
        assert lines[2] == "destroy -input=false -no-color -auto-approve TF_IN_AUTOMATION=1 EXTRA=1"

    def test_returns_output(self, tmp_path: Path, workdir: Path):
        binary = _fake_terraform(tmp_path, 'echo "Apply complete!"\n')
        tf = Terraform(workdir, TerraformSettings(binary=binary))
        tf.write_config("")
        assert "Apply complete!" in tf.apply()

    def test_failure_carries_output_tail(self, tmp_path: Path, workdir: Path):
        binary = _fake_terraform(tmp_path, 'echo "Error: googleapi: 403" >&2\nexit 1\n')
        tf = Terraform(workdir, TerraformSettings(binary=binary))
        tf.write_config("")

        with pytest.raises(TerraformError) as exc:
            tf.apply()

        assert exc.value.command == "apply"
        assert exc.value.returncode == 1
        assert "googleapi: 403" in exc.value.output

    def test_missing_binary(self, tmp_path: Path, workdir: Path):
        tf = Terraform(workdir, TerraformSettings(binary=str(tmp_path / "nope")))
        tf.write_config("")
        with pytest.raises(TerraformError, match="not found"):
            tf.init()


class TestShowState:
    def test_parses_json(self, tmp_path: Path, workdir: Path):
        payload = show_json(resource_json("google_dataflow_flex_template_job.big_data", id=JOB_ID))
        data = tmp_path / "state.json"
        data.write_text(json.dumps(payload))
        binary = _fake_terraform(tmp_path, f'echo "warning on stderr" >&2\ncat {data}\n')
        tf = Terraform(workdir, TerraformSettings(binary=binary))
        tf.write_config("")

        assert tf.show_state() == payload

    def test_empty_output(self, tmp_path: Path, workdir: Path):
        binary = _fake_terraform(tmp_path, "exit 0\n")
        tf = Terraform(workdir, TerraformSettings(binary=binary))
        tf.write_config("")
        assert tf.show_state() == {}

    def test_failure(self, tmp_path: Path, workdir: Path):
        binary = _fake_terraform(tmp_path, 'echo "no state" >&2\nexit 1\n')
        tf = Terraform(workdir, TerraformSettings(binary=binary))
        tf.write_config("")
        with pytest.raises(TerraformError, match="no state"):
            tf.show_state()
