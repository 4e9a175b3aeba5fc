"""Catalog client over requests, plus the dev mock catalog."""

from unittest.mock import MagicMock

import pytest
import requests
from fastapi.testclient import TestClient

from foodorder.catalog_service.main import app as catalog_app
from foodorder.domain.errors import CatalogError
from foodorder.services.catalog_client import CatalogClient


def _response(status_code, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code}")
    return resp


@pytest.fixture()
def client():
    return CatalogClient(base_url="http://catalog.test/")


def test_fetch_food(client, monkeypatch):
    get = MagicMock(return_value=_response(200, {"id": "4", "name": "Pizza", "price": 10}))
    monkeypatch.setattr(requests, "get", get)

    assert client.fetch_food("4") == {"id": "4", "name": "Pizza", "price": 10}
    assert get.call_args.args[0] == "http://catalog.test/foods/4"


def test_unknown_food_is_none(client, monkeypatch):
    monkeypatch.setattr(requests, "get", MagicMock(return_value=_response(404)))

    assert client.fetch_food("missing") is None


def test_unreachable_catalog_is_retried_then_fails(client, monkeypatch):
    get = MagicMock(side_effect=requests.ConnectionError("refused"))
    monkeypatch.setattr(requests, "get", get)
    monkeypatch.setattr(CatalogClient._get.retry, "sleep", lambda seconds: None)

    with pytest.raises(CatalogError):
        client.fetch_food("4")

    assert get.call_count == 3


def test_mock_catalog_serves_foods():
    mock = TestClient(catalog_app)

    assert mock.get("/foods/4").json()["name"] == "Pizza"
    assert mock.get("/foods/999").status_code == 404
