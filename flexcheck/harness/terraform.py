"""Terraform CLI runner.

Thin wrapper over the ``terraform`` binary: every subcommand runs
non-interactively in a dedicated working directory, output is streamed to
the logger line by line, and the tail is kept for error reporting.
"""

from __future__ import annotations

import json
import os
import subprocess
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from flexcheck.core.exceptions import TerraformError

log = logger.bind(component="terraform")

CONFIG_FILE = "main.tf"
_TAIL_LINES = 50
_TAIL_CHARS = 800


@dataclass(frozen=True, slots=True)
class TerraformSettings:
    """How to invoke terraform.

    Args:
        binary: Executable name or path. Default: terraform.
        env: Extra environment variables for every subcommand.
    """

    binary: str = "terraform"
    env: Mapping[str, str] = field(default_factory=dict)


class Terraform:
    """Run terraform subcommands in one working directory."""

    __slots__ = ("_workdir", "_settings")

    def __init__(self, workdir: Path, settings: TerraformSettings | None = None) -> None:
        self._workdir = Path(workdir)
        self._settings = settings or TerraformSettings()

    @property
    def workdir(self) -> Path:
        return self._workdir

    def write_config(self, config: str) -> Path:
        self._workdir.mkdir(parents=True, exist_ok=True)
        path = self._workdir / CONFIG_FILE
        path.write_text(config, encoding="utf-8")
        log.debug("Wrote {n} bytes of configuration to {path}", n=len(config), path=path)
        return path

    def init(self) -> str:
        return self._run(["init", "-input=false", "-no-color"])

    def apply(self) -> str:
        return self._run(["apply", "-input=false", "-no-color", "-auto-approve"])

    def destroy(self) -> str:
        return self._run(["destroy", "-input=false", "-no-color", "-auto-approve"])

    def show_state(self) -> dict[str, Any]:
        """Return ``terraform show -json`` output for the current state."""
        cmd = [self._settings.binary, "show", "-json", "-no-color"]
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(self._workdir),
                env=self._env(),
                text=True,
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise TerraformError("show", 127, f"{self._settings.binary} not found") from e

        if proc.returncode != 0:
            raise TerraformError("show", proc.returncode, proc.stderr.strip()[-_TAIL_CHARS:])
        return json.loads(proc.stdout) if proc.stdout.strip() else {}

    def _env(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self._settings.env)
        env["TF_IN_AUTOMATION"] = "1"
        return env

    def _run(self, args: Sequence[str]) -> str:
        cmd = [self._settings.binary, *args]
        label = args[0]
        log.info("terraform {label} in {dir}", label=label, dir=self._workdir)

        tail: deque[str] = deque(maxlen=_TAIL_LINES)
        lines: list[str] = []

        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(self._workdir),
                env=self._env(),
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                bufsize=1,
            )
        except FileNotFoundError as e:
            raise TerraformError(label, 127, f"{self._settings.binary} not found") from e

        assert proc.stdout is not None
        with proc.stdout:
            for line in proc.stdout:
                stripped = line.rstrip("\n")
                lines.append(line)
                tail.append(stripped)
                log.debug("[{label}] {line}", label=label, line=stripped)
        returncode = proc.wait()

        if returncode != 0:
            snippet = "\n".join(tail)[-_TAIL_CHARS:]
            log.error("terraform {label} failed (rc={rc})", label=label, rc=returncode)
            raise TerraformError(label, returncode, snippet)

        return "".join(lines)
