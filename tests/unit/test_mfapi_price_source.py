"""
Unit tests for the mutual-fund NAV price source.
"""

from datetime import date
from unittest.mock import Mock

import pytest
import requests

from src.core.exceptions.tracker import DataSourceError
from src.infrastructure.data import MFAPIPriceSource
from src.infrastructure.data.mfapi_price_source import parse_price_payload

PAYLOAD = {
    "meta": {"scheme_code": 120503, "scheme_name": "Axis Bluechip Fund - Direct Growth"},
    "data": [
        {"date": "07-03-2024", "nav": "52.1234"},
        {"date": "06-03-2024", "nav": "51.0000"},
        {"date": "06-03-2024", "nav": "49.0000"},
        {"date": "bad", "nav": "50.0"},
        {"date": "05-03-2024", "nav": "0"},
        {"nav": "50.0"},
    ],
    "status": "SUCCESS",
}


def make_session(payload=PAYLOAD) -> Mock:
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    session = Mock()
    session.get.return_value = response
    return session


class TestParsePricePayload:
    """Tests for parse_price_payload."""

    def test_should_build_history_from_valid_records(self) -> None:
        """Test parsing with malformed and duplicate records."""
        history = parse_price_payload("120503", PAYLOAD)

        assert history.name == "Axis Bluechip Fund - Direct Growth"
        assert dict(history.prices) == {
            date(2024, 3, 7): 52.1234,
            date(2024, 3, 6): 51.0,
        }
        assert history.latest_price() == 52.1234

    def test_should_allow_missing_meta(self) -> None:
        """Test payloads without a scheme name."""
        history = parse_price_payload("120503", {"data": []})

        assert history.name == ""
        assert history.display_name == "120503"

    @pytest.mark.parametrize("payload", [[], "oops", {"data": "x"}])
    def test_should_reject_unexpected_shape(self, payload) -> None:
        """Test payload validation."""
        with pytest.raises(DataSourceError, match="unexpected payload"):
            parse_price_payload("120503", payload)


class TestMFAPIPriceSource:
    """Tests for MFAPIPriceSource."""

    def test_should_fetch_scheme_url(self) -> None:
        """Test the request target."""
        session = make_session()
        source = MFAPIPriceSource(base_url="https://api.example.com/mf/", session=session)

        history = source.fetch_price_series("120503")

        assert history.instrument_id == "120503"
        session.get.assert_called_once_with("https://api.example.com/mf/120503", timeout=15.0)

    def test_should_cache_histories(self) -> None:
        """Test that repeated fetches hit the network once."""
        session = make_session()
        source = MFAPIPriceSource(session=session)

        first = source.fetch_price_series("120503")
        second = source.fetch_price_series(" 120503 ")

        assert first is second
        assert session.get.call_count == 1

        source.clear_cache()
        source.fetch_price_series("120503")
        assert session.get.call_count == 2

    @pytest.mark.parametrize(
        "failure",
        [requests.exceptions.ConnectionError("refused"), requests.exceptions.Timeout("slow")],
    )
    def test_should_wrap_network_errors(self, failure) -> None:
        """Test request failures."""
        session = make_session()
        session.get.side_effect = failure

        with pytest.raises(DataSourceError, match="request for 120503 failed"):
            MFAPIPriceSource(session=session).fetch_price_series("120503")

    def test_should_wrap_http_errors(self) -> None:
        """Test non-2xx responses."""
        session = make_session()
        session.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError(
            "404"
        )

        with pytest.raises(DataSourceError):
            MFAPIPriceSource(session=session).fetch_price_series("120503")

    def test_should_wrap_invalid_json(self) -> None:
        """Test undecodable bodies."""
        session = make_session()
        session.get.return_value.json.side_effect = ValueError("Expecting value")

        with pytest.raises(DataSourceError, match="invalid JSON"):
            MFAPIPriceSource(session=session).fetch_price_series("120503")

    def test_should_reject_invalid_instrument_id(self) -> None:
        """Test that no request is made for a blank id."""
        session = make_session()

        with pytest.raises(DataSourceError):
            MFAPIPriceSource(session=session).fetch_price_series("")
        session.get.assert_not_called()
