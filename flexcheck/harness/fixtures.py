"""HCL configurations for the flex template job scenarios.

Configurations are rendered by plain substitution; nothing here parses HCL.
Both create a job that doesn't actually do anything: the flex template points
at a placeholder image, which is enough for Dataflow to accept the job and
start a worker.
"""

from __future__ import annotations

import json
import secrets
import string
from dataclasses import dataclass
from string import Template

RESOURCE_ADDRESS = "google_dataflow_flex_template_job.big_data"

_ALPHABET = string.ascii_lowercase + string.digits


class HCLTemplate(Template):
    """Template using ``%%name`` placeholders so HCL ``${...}`` passes through."""

    delimiter = "%%"


FLEX_TEMPLATE_SPEC: dict[str, object] = {
    "image": "my-image",
    "metadata": {
        "description": (
            "An Apache Beam streaming pipeline that reads JSON encoded messages "
            "from Pub/Sub, uses Beam SQL to transform the message data, and "
            "writes the results to a BigQuery"
        ),
        "name": "Streaming Beam SQL",
        "parameters": [
            {
                "helpText": "Pub/Sub subscription to read from.",
                "label": "Pub/Sub input subscription.",
                "name": "inputSubscription",
                "regexes": ["[-_.a-zA-Z0-9]+"],
            },
            {
                "helpText": "BigQuery table spec to write to, in the form 'project:dataset.table'.",
                "is_optional": True,
                "label": "BigQuery output table",
                "name": "outputTable",
                "regexes": ["[^:]+:[^.]+[.].+"],
            },
        ],
    },
    "sdkInfo": {"language": "JAVA"},
}

_BUCKET = HCLTemplate("""
resource "google_storage_bucket" "temp" {
  name          = "%%bucket"
  force_destroy = true
}

resource "google_storage_bucket_object" "flex_template" {
  name    = "flex_template.json"
  bucket  = google_storage_bucket.temp.name
  content = <<EOF
%%spec
EOF
}
""")

_SERVICE_ACCOUNT = HCLTemplate("""
resource "google_service_account" "dataflow-sa" {
  account_id   = "%%account_id"
  display_name = "DataFlow Service Account"
}

resource "google_storage_bucket_iam_member" "dataflow-gcs" {
  bucket = google_storage_bucket.temp.name
  role   = "roles/storage.objectAdmin"
  member = "serviceAccount:${google_service_account.dataflow-sa.email}"
}

resource "google_project_iam_member" "dataflow-worker" {
  role   = "roles/dataflow.worker"
  member = "serviceAccount:${google_service_account.dataflow-sa.email}"
}
""")

_JOB = HCLTemplate("""
resource "google_dataflow_flex_template_job" "big_data" {
  name                    = "%%job"
  container_spec_gcs_path = "${google_storage_bucket.temp.url}/${google_storage_bucket_object.flex_template.name}"
  on_delete               = "cancel"
  parameters = {
%%parameters
  }
%%extra}
""")


def random_suffix(length: int = 10) -> str:
    """Random lowercase alphanumeric suffix, safe for bucket and account names."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


@dataclass(frozen=True, slots=True)
class ScenarioNames:
    """Resource names for one scenario run, sharing a random suffix."""

    bucket: str
    job: str
    account_id: str

    @classmethod
    def generate(cls, suffix: str | None = None) -> ScenarioNames:
        suffix = suffix or random_suffix()
        return cls(
            bucket=f"tf-test-dataflow-gcs-{suffix}",
            job=f"tf-test-dataflow-job-{suffix}",
            account_id=f"tf-test-dataflow-sa{suffix}",
        )


def _parameters(params: dict[str, str]) -> str:
    width = max(len(k) for k in params)
    return "\n".join(f"    {k.ljust(width)} = {v}" for k, v in params.items())


def _bucket(bucket: str) -> str:
    return _BUCKET.substitute(bucket=bucket, spec=json.dumps(FLEX_TEMPLATE_SPEC, indent=4))


def basic_config(bucket: str, job: str) -> str:
    """Configuration with a bucket, the template object and the job."""
    params = {
        "inputSubscription": '"my-subscription"',
        "outputTable": '"my-project:my-dataset.my-table"',
    }
    job_block = _JOB.substitute(job=job, parameters=_parameters(params), extra="")
    return _bucket(bucket) + job_block


def service_account_config(bucket: str, job: str, account_id: str, zone: str) -> str:
    """Configuration whose job runs its workers as a dedicated service account.

    The job waits on the IAM bindings so the account can read the template
    and act as a Dataflow worker before the first VM boots.
    """
    params = {
        "inputSubscription": '"my-subscription"',
        "outputTable": '"my-project:my-dataset.my-table"',
        "serviceAccount": "google_service_account.dataflow-sa.email",
        "zone": f'"{zone}"',
    }
    depends_on = (
        "  depends_on = [\n"
        "    google_storage_bucket_iam_member.dataflow-gcs,\n"
        "    google_project_iam_member.dataflow-worker,\n"
        "  ]\n"
    )
    job_block = _JOB.substitute(job=job, parameters=_parameters(params), extra=depends_on)
    return (
        _bucket(bucket)
        + _SERVICE_ACCOUNT.substitute(account_id=account_id)
        + job_block
    )
