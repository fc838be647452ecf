"""Tests for batched registry lookups."""

import logging
import threading
import time
from unittest.mock import patch

from semantic_version import Version

from constants import Constants
from errors import RegistryError
from registry.nuget.lookup import populate_versions
from versioning.models import Catalog
from versioning.selector import parse_versions


def fake_registry(table):
    def fetch(package_id):
        result = table[package_id]
        if isinstance(result, Exception):
            raise result
        return parse_versions(result)
    return fetch


class TestPopulateVersions:
    """Registry lookups populate seeds and isolate failures."""

    def test_populates_current_and_lts(self):
        catalog = Catalog.from_seeds(["Microsoft.NETCore.App"])
        fetch = fake_registry({"Microsoft.NETCore.App": ["2.0.0", "2.1.0", "3.1.5", "3.1.0"]})

        populate_versions(catalog, fetch=fetch)

        pkg = catalog["Microsoft.NETCore.App"]
        assert pkg.current_version == "3.1.5"
        assert pkg.lts_version == "2.0.0"

    def test_failed_lookup_does_not_abort_siblings(self, caplog):
        catalog = Catalog.from_seeds(["A", "B", "C"])
        fetch = fake_registry({
            "A": ["1.0.0"],
            "B": RegistryError("boom"),
            "C": ["2.1.0", "2.0.3"],
        })

        with caplog.at_level(logging.INFO):
            populate_versions(catalog, fetch=fetch)

        assert catalog["A"].current_version == "1.0.0"
        assert catalog["B"].current_version is None
        assert catalog["B"].lts_version is None
        assert (catalog["C"].current_version, catalog["C"].lts_version) == ("2.1.0", "2.0.3")
        assert "Failed to get versions for B: boom" in caplog.text

    def test_unexpected_exception_is_isolated(self):
        catalog = Catalog.from_seeds(["A", "B"])
        fetch = fake_registry({"A": RuntimeError("bad"), "B": ["1.0.0"]})

        populate_versions(catalog, fetch=fetch)

        assert catalog["A"].current_version is None
        assert catalog["B"].current_version == "1.0.0"

    def test_no_stable_versions_warns(self, caplog):
        catalog = Catalog.from_seeds(["Empty"])

        with caplog.at_level(logging.WARNING):
            populate_versions(catalog, fetch=fake_registry({"Empty": []}))

        assert catalog["Empty"].current_version is None
        assert "Empty has no stable versions" in caplog.text

    def test_batches_complete_before_next_starts(self):
        ids = [f"Pkg{i}" for i in range(7)]
        catalog = Catalog.from_seeds(ids)
        lock = threading.Lock()
        state = {"active": 0, "peak": 0, "done": 0}
        started_after = {}

        def fetch(package_id):
            with lock:
                started_after[package_id] = state["done"]
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.01)
            with lock:
                state["active"] -= 1
                state["done"] += 1
            return [Version("1.0.0")]

        populate_versions(catalog, fetch=fetch, batch_size=3)

        assert state["peak"] <= 3
        for index, package_id in enumerate(ids):
            assert started_after[package_id] >= (index // 3) * 3
        assert all(catalog[i].current_version == "1.0.0" for i in ids)

    def test_default_batch_size_is_twenty(self):
        ids = [f"Pkg{i}" for i in range(45)]
        catalog = Catalog.from_seeds(ids)
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def fetch(_package_id):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.005)
            with lock:
                state["active"] -= 1
            return []

        populate_versions(catalog, fetch=fetch)

        assert state["peak"] <= 20


INDEX_URL = "https://api.nuget.org/v3/index.json"
SERVICE_INDEX = {
    "resources": [{"@id": "https://example.org/reg/", "@type": "RegistrationsBaseUrl/3.6.0"}],
}


class TestDefaultRegistryFetcher:
    """The default fetcher reads the service index once per run."""

    def test_service_index_fetched_once_for_all_packages(self, monkeypatch):
        monkeypatch.setattr(Constants, "REGISTRY_URL_NUGET_V3", INDEX_URL)
        ids = ["A", "B", "C", "D", "E"]
        lock = threading.Lock()
        requested = []

        def fake_get_json(url, *, context, headers=None):
            with lock:
                requested.append(url)
            if url == INDEX_URL:
                return 200, SERVICE_INDEX
            return 200, {"items": [{"items": [{"catalogEntry": {"version": "4.0.0.1"}}]}]}

        catalog = Catalog.from_seeds(ids)
        with patch("registry.nuget.client.nuget_pkg.get_json", side_effect=fake_get_json):
            populate_versions(catalog, batch_size=2)

        assert requested.count(INDEX_URL) == 1
        assert sorted(u for u in requested if u != INDEX_URL) == [
            f"https://example.org/reg/{i.lower()}/index.json" for i in ids
        ]
        assert all(catalog[i].current_version == "4.0.0.1" for i in ids)

    def test_unavailable_index_leaves_all_packages_empty(self, caplog):
        catalog = Catalog.from_seeds(["A", "B"])

        with patch("registry.nuget.client.nuget_pkg.get_json", return_value=(503, None)) as mock_get_json:
            with caplog.at_level(logging.ERROR):
                populate_versions(catalog)

        mock_get_json.assert_called_once()
        assert catalog["A"].current_version is None
        assert catalog["B"].lts_version is None
        assert "Failed to get versions for A" in caplog.text
        assert "Failed to get versions for B" in caplog.text

    def test_empty_catalog_skips_registry(self):
        with patch("registry.nuget.client.nuget_pkg.get_json") as mock_get_json:
            populate_versions(Catalog())
        mock_get_json.assert_not_called()
