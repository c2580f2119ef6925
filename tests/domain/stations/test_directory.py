"""Tests for the remote station directory client."""

from unittest.mock import MagicMock

import pytest
import requests

from cherry_radio.core.exceptions import NetworkError
from cherry_radio.domain.stations.directory import CATALOG_FILTER, fetch_catalog
from cherry_radio.domain.stations.exceptions import RefreshError
from cherry_radio.domain.stations.models import Station

ENDPOINT = "http://all.api.radio-browser.info/json/stations/search"


@pytest.fixture
def http() -> MagicMock:
    return MagicMock()


class TestFetchCatalog:
    """Tests for fetch_catalog."""

    def test_sends_fixed_filter(self, http: MagicMock) -> None:
        """Test the request asks for working MP3 stations only."""
        http.get.return_value.json.return_value = []

        fetch_catalog(ENDPOINT, timeout=12.0, user_agent="test-agent", http=http)

        http.get.assert_called_once_with(
            ENDPOINT,
            params={"codec": "MP3", "lastcheckok": "1"},
            headers={"User-Agent": "test-agent"},
            timeout=12.0,
        )
        assert CATALOG_FILTER == {"codec": "MP3", "lastcheckok": "1"}

    def test_returns_raw_entries(self, http: MagicMock) -> None:
        entries = [{"url": "http://x", "name": "X", "tags": "rock", "bitrate": 128}]
        http.get.return_value.json.return_value = entries

        assert fetch_catalog(ENDPOINT, http=http) == entries

    def test_connection_error(self, http: MagicMock) -> None:
        http.get.side_effect = requests.ConnectionError("no route")

        with pytest.raises(NetworkError):
            fetch_catalog(ENDPOINT, http=http)

    def test_http_error_status(self, http: MagicMock) -> None:
        http.get.return_value.raise_for_status.side_effect = requests.HTTPError("503")

        with pytest.raises(NetworkError):
            fetch_catalog(ENDPOINT, http=http)

    def test_invalid_json(self, http: MagicMock) -> None:
        http.get.return_value.json.side_effect = ValueError("Expecting value")

        with pytest.raises(RefreshError):
            fetch_catalog(ENDPOINT, http=http)

    def test_non_list_payload(self, http: MagicMock) -> None:
        http.get.return_value.json.return_value = {"error": "rate limited"}

        with pytest.raises(RefreshError):
            fetch_catalog(ENDPOINT, http=http)


class TestStation:
    """Tests for the Station model."""

    def test_identity_is_url(self) -> None:
        a = Station(url="http://x", name="One", tags="rock")
        b = Station(url="http://x", name="Renamed", tags="pop")
        assert a == b
        assert len({a, b}) == 1

    def test_from_dict_requires_string_fields(self) -> None:
        assert Station.from_dict({"url": "http://x", "name": "X", "tags": None}) is None
        assert Station.from_dict({"url": "http://x", "tags": "rock"}) is None

    def test_round_trip_keeps_extra_fields(self) -> None:
        entry = {"url": "http://x", "name": "X", "tags": "rock", "countrycode": "DE"}
        assert Station.from_dict(entry).to_dict() == entry

    def test_matches_normalizes_both_sides(self) -> None:
        station = Station(url="http://x", name="X", tags="Drum and Bass,Jungle")
        assert station.matches("  JUNGLE ")
        assert not station.matches("techno")
