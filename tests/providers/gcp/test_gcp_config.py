from __future__ import annotations

import pytest

from flexcheck.core.exceptions import ConfigurationError
from flexcheck.providers.gcp.config import GCP, resolve_project

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit")]


class TestGCP:
    def test_defaults(self):
        config = GCP()
        assert config.region == "us-central1"
        assert config.zone == "us-central1-b"
        assert config.lookup_timeout == 60.0
        assert config.poll_interval == 5.0
        assert config.max_results == 2

    def test_frozen(self):
        with pytest.raises(AttributeError):
            GCP().zone = "x"  # type: ignore[misc]

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ConfigurationError, match="lookup_timeout"):
            GCP(lookup_timeout=0)

    def test_rejects_cap_below_two(self):
        with pytest.raises(ConfigurationError, match="max_results"):
            GCP(max_results=1)


class TestResolveProject:
    def test_explicit_wins(self):
        assert resolve_project("explicit") == "explicit"

    def test_google_project_env(self):
        assert resolve_project(None) == "test-project"

    def test_fallback_env_order(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("GOOGLE_PROJECT")
        monkeypatch.setenv("GCLOUD_PROJECT", "gcloud-project")
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "cloud-project")
        assert resolve_project(None) == "cloud-project"

    def test_adc_without_project(self, monkeypatch: pytest.MonkeyPatch):
        import google.auth

        for var in ("GOOGLE_PROJECT", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setattr(google.auth, "default", lambda: (object(), None))

        with pytest.raises(ConfigurationError, match="project not set"):
            resolve_project(None)

    def test_adc_project(self, monkeypatch: pytest.MonkeyPatch):
        import google.auth

        for var in ("GOOGLE_PROJECT", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setattr(google.auth, "default", lambda: (object(), "adc-project"))

        assert resolve_project(None) == "adc-project"
