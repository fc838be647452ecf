"""Tests for NuGet client version listing."""

from unittest.mock import patch

import pytest

from errors import RegistryError
from registry.nuget.client import (
    _collect_listed_versions,
    _get_v3_registration_base,
    _get_v3_registration_url,
    fetch_stable_versions,
    resolve_registration_base,
)

SERVICE_INDEX = {
    "version": "3.0.0",
    "resources": [
        {"@id": "https://api.nuget.org/v3-flatcontainer/", "@type": "PackageBaseAddress/3.0.0"},
        {"@id": "https://api.nuget.org/v3/registration5-semver1/", "@type": "RegistrationsBaseUrl/3.6.0"},
    ],
}
REGISTRATION_BASE = "https://api.nuget.org/v3/registration5-semver1/"


def leaf(version, listed=None):
    entry = {"version": version}
    if listed is not None:
        entry["listed"] = listed
    return {"catalogEntry": entry}


class TestGetV3RegistrationUrl:
    """Test V3 registration URL construction."""

    def test_constructs_lowercase_url(self):
        url = _get_v3_registration_url("Microsoft.NETCore.App", _get_v3_registration_base(SERVICE_INDEX))
        assert url == "https://api.nuget.org/v3/registration5-semver1/microsoft.netcore.app/index.json"

    def test_adds_missing_trailing_slash(self):
        index = {"resources": [{"@id": "https://example.org/reg", "@type": "RegistrationsBaseUrl/3.6.0"}]}
        base = _get_v3_registration_base(index)
        assert base == "https://example.org/reg/"
        assert _get_v3_registration_url("Pkg", base) == "https://example.org/reg/pkg/index.json"

    def test_missing_resource_raises(self):
        with pytest.raises(RegistryError):
            _get_v3_registration_base({"resources": []})


class TestResolveRegistrationBase:
    """Test one-shot service index resolution."""

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_reads_service_index_once(self, mock_get_json):
        mock_get_json.return_value = (200, SERVICE_INDEX)

        assert resolve_registration_base("https://mirror.example/v3/index.json") == REGISTRATION_BASE
        mock_get_json.assert_called_once_with("https://mirror.example/v3/index.json", context="nuget")

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_unavailable_index_raises(self, mock_get_json):
        mock_get_json.return_value = (503, None)
        with pytest.raises(RegistryError):
            resolve_registration_base()


class TestCollectListedVersions:
    """Test extraction of versions from registration pages."""

    def test_inline_pages_skip_unlisted(self):
        registration = {
            "items": [
                {"items": [leaf("1.0.0"), leaf("1.0.1", listed=False)]},
                {"items": [leaf("2.0.0", listed=True)]},
            ]
        }
        assert _collect_listed_versions(registration) == ["1.0.0", "2.0.0"]

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_fetches_non_inlined_pages(self, mock_get_json):
        mock_get_json.return_value = (200, {"items": [leaf("3.1.0"), leaf("3.1.5")]})
        registration = {"items": [{"@id": "https://example.org/reg/pkg/page/3.0.0/3.1.5.json"}]}

        assert _collect_listed_versions(registration) == ["3.1.0", "3.1.5"]
        mock_get_json.assert_called_once_with(
            "https://example.org/reg/pkg/page/3.0.0/3.1.5.json", context="nuget"
        )

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_page_failure_raises(self, mock_get_json):
        mock_get_json.return_value = (500, None)
        with pytest.raises(RegistryError):
            _collect_listed_versions({"items": [{"@id": "https://example.org/page.json"}]})


class TestFetchStableVersions:
    """Test the full version listing flow."""

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_returns_stable_versions(self, mock_get_json):
        mock_get_json.side_effect = [
            (200, SERVICE_INDEX),
            (200, {"items": [{"items": [
                leaf("2.0.0"), leaf("2.1.0"), leaf("3.1.5"), leaf("3.1.0"),
                leaf("5.0.0-preview.1"), leaf("1.0.0", listed=False),
            ]}]}),
        ]

        result = fetch_stable_versions("Microsoft.NETCore.App")

        assert [str(v) for v in result] == ["2.0.0", "2.1.0", "3.1.5", "3.1.0"]

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_uses_registry_url_override(self, mock_get_json):
        mock_get_json.side_effect = [(200, SERVICE_INDEX), (200, {"items": []})]

        fetch_stable_versions("Pkg", registry_url="https://mirror.example/v3/index.json")

        assert mock_get_json.call_args_list[0].args[0] == "https://mirror.example/v3/index.json"

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_unknown_package_has_no_versions(self, mock_get_json):
        mock_get_json.side_effect = [(200, SERVICE_INDEX), (404, None)]
        assert fetch_stable_versions("Does.Not.Exist") == []

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_service_index_failure_raises(self, mock_get_json):
        mock_get_json.return_value = (503, None)
        with pytest.raises(RegistryError):
            fetch_stable_versions("Pkg")

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_registration_failure_raises(self, mock_get_json):
        mock_get_json.side_effect = [(200, SERVICE_INDEX), (500, None)]
        with pytest.raises(RegistryError):
            fetch_stable_versions("Pkg")

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_resolved_base_skips_service_index(self, mock_get_json):
        mock_get_json.return_value = (200, {"items": [{"items": [leaf("1.0.0")]}]})

        result = fetch_stable_versions("Pkg", registration_base="https://example.org/reg/")

        assert [str(v) for v in result] == ["1.0.0"]
        mock_get_json.assert_called_once_with("https://example.org/reg/pkg/index.json", context="nuget")

    @patch("registry.nuget.client.nuget_pkg.get_json")
    def test_four_part_versions_returned_as_published(self, mock_get_json):
        mock_get_json.return_value = (200, {"items": [{"items": [leaf("4.0.0.1"), leaf("3.0.0")]}]})

        result = fetch_stable_versions("Legacy.Pkg", registration_base=REGISTRATION_BASE)

        assert [str(v) for v in result] == ["4.0.0.1", "3.0.0"]
