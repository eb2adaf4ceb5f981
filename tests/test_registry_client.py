"""Tests for registry lookups with mocked HTTP."""
from unittest.mock import Mock

import pytest
import requests

from pkgver.config.settings import Settings
from pkgver.core.registry_client import RegistryClient, pick_packagist_version
from pkgver.models import Ecosystem


def _response(status=200, payload=None):
    resp = Mock()
    resp.status_code = status
    resp.json.return_value = payload
    return resp


@pytest.fixture
def config():
    return Settings(
        exclude_folders=[],
        npm_registry="https://npm.test",
        packagist_registry="https://packagist.test",
        pypi_registry="https://pypi.test",
        pub_registry="https://pub.test",
        request_timeout=3.0,
        max_workers=2,
    )


@pytest.fixture
def session():
    s = Mock()
    s.headers = {}
    return s


class TestFetchers:
    def test_npm(self, config, session):
        session.get.return_value = _response(payload={"version": "4.17.21"})
        client = RegistryClient(config, session=session)

        assert client.latest_version(Ecosystem.NPM, "lodash") == "4.17.21"
        session.get.assert_called_once_with("https://npm.test/lodash/latest", timeout=3.0)

    def test_npm_scoped_name_is_encoded(self, config, session):
        session.get.return_value = _response(payload={"version": "20.0.0"})
        RegistryClient(config, session=session).fetch_npm("@types/node")
        assert session.get.call_args[0][0] == "https://npm.test/@types%2Fnode/latest"

    def test_pypi(self, config, session):
        session.get.return_value = _response(payload={"info": {"version": "2.31.0"}})
        client = RegistryClient(config, session=session)
        assert client.latest_version(Ecosystem.PYPI, "requests") == "2.31.0"
        assert session.get.call_args[0][0] == "https://pypi.test/pypi/requests/json"

    def test_pub(self, config, session):
        session.get.return_value = _response(payload={"latest": {"version": "1.2.0"}})
        client = RegistryClient(config, session=session)
        assert client.latest_version(Ecosystem.DART, "http") == "1.2.0"
        assert session.get.call_args[0][0] == "https://pub.test/api/packages/http"

    def test_packagist(self, config, session):
        session.get.return_value = _response(payload={"packages": {"monolog/monolog": [
            {"version": "3.5.0", "version_normalized": "3.5.0.0", "time": "2023-10-27T15:32:31+00:00"},
            {"version": "3.4.0", "version_normalized": "3.4.0.0", "time": "2023-06-21T08:46:11+00:00"},
        ]}})
        client = RegistryClient(config, session=session)
        assert client.latest_version(Ecosystem.COMPOSER, "Monolog/Monolog") == "3.5.0"
        assert session.get.call_args[0][0] == "https://packagist.test/p2/monolog/monolog.json"

    def test_packagist_requires_vendor(self, config, session):
        assert RegistryClient(config, session=session).fetch_packagist("monolog") is None
        session.get.assert_not_called()

    def test_user_agent_set(self, config, session):
        RegistryClient(config, session=session)
        assert session.headers["User-Agent"] == config.user_agent


class TestFailures:
    def test_not_found(self, config, session):
        session.get.return_value = _response(status=404)
        assert RegistryClient(config, session=session).fetch_npm("nope") is None

    def test_server_error(self, config, session):
        session.get.return_value = _response(status=500)
        assert RegistryClient(config, session=session).fetch_pypi("x") is None

    @pytest.mark.parametrize("exc", [requests.Timeout(), requests.ConnectionError("down")])
    def test_network_errors(self, config, session, exc):
        session.get.side_effect = exc
        assert RegistryClient(config, session=session).fetch_pub("x") is None

    def test_invalid_json(self, config, session):
        resp = _response()
        resp.json.side_effect = ValueError("bad")
        session.get.return_value = resp
        assert RegistryClient(config, session=session).fetch_npm("x") is None

    def test_unexpected_payload(self, config, session):
        session.get.return_value = _response(payload={"nothing": True})
        assert RegistryClient(config, session=session).fetch_pypi("x") is None


class TestCache:
    def test_lookup_cached_until_cleared(self, config, session):
        session.get.return_value = _response(payload={"version": "1.0.0"})
        client = RegistryClient(config, session=session)

        client.latest_version(Ecosystem.NPM, "a")
        client.latest_version(Ecosystem.NPM, "a")
        assert session.get.call_count == 1

        client.clear_cache()
        client.latest_version(Ecosystem.NPM, "a")
        assert session.get.call_count == 2

    def test_failures_cached_too(self, config, session):
        session.get.return_value = _response(status=404)
        client = RegistryClient(config, session=session)
        assert client.latest_version(Ecosystem.NPM, "a") is None
        assert client.latest_version(Ecosystem.NPM, "a") is None
        assert session.get.call_count == 1


class TestPickPackagistVersion:
    def test_newest_stable_by_time(self):
        entries = [
            {"version": "v2.0.0", "version_normalized": "2.0.0.0", "time": "2023-01-01T00:00:00+00:00"},
            {"version": "v2.1.0", "version_normalized": "2.1.0.0", "time": "2023-06-01T00:00:00+00:00"},
            {"version": "v1.9.9", "version_normalized": "1.9.9.0", "time": "2023-03-01T00:00:00Z"},
            {"version": "v3.0.0-beta1", "version_normalized": "3.0.0.0-beta1", "time": "2024-01-01T00:00:00+00:00"},
            {"version": "dev-main", "version_normalized": "dev-main"},
        ]
        assert pick_packagist_version(entries) == "v2.1.0"

    def test_highest_version_without_times(self):
        entries = [
            {"version": "1.0.0", "version_normalized": "1.0.0.0"},
            {"version": "1.2.0", "version_normalized": "1.2.0.0"},
            {"version": "1.1.0", "version_normalized": "1.1.0.0"},
        ]
        assert pick_packagist_version(entries) == "1.2.0"

    def test_prerelease_only_when_nothing_stable(self):
        entries = [
            {"version": "1.0.0-RC1", "version_normalized": "1.0.0.0-RC1"},
            {"version": "dev-main", "version_normalized": "9999999-dev"},
        ]
        assert pick_packagist_version(entries) == "1.0.0-RC1"

    def test_incomplete_entries_skipped(self):
        assert pick_packagist_version([{"version": "1.0.0"}, {}]) is None
