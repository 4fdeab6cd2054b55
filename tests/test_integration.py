import pytest
from fastapi.testclient import TestClient

from routewise.data.locations_repository import LocationCatalog
from routewise.main import create_app
from routewise.models.domain import Location, MapBounds

from .conftest import FailingProvider, StaticProvider


def _catalog() -> LocationCatalog:
    return LocationCatalog(
        [
            Location(1, "A", 28.60, 77.20),
            Location(2, "B", 28.65, 77.25),
            Location(3, "Red Fort", 28.6562, 77.2410),
        ],
        bounds=MapBounds(south=28.4, west=76.8, north=28.9, east=77.6),
    )


@pytest.fixture
def api_client() -> TestClient:
    app = create_app(catalog=_catalog(), provider=StaticProvider())
    return TestClient(app)


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_reports_map_view(api_client: TestClient):
    payload = api_client.get("/").json()

    assert payload["status"] == "running"
    assert payload["map"]["center"] == pytest.approx([28.65, 77.2])
    assert payload["map"]["bounds"] == [28.4, 76.8, 28.9, 77.6]


def test_list_and_search_locations(api_client: TestClient):
    payload = api_client.get("/api/locations").json()
    assert payload["total"] == 3
    assert payload["notice"] is None

    filtered = api_client.get("/api/locations", params={"search": "fort"}).json()
    assert [item["name"] for item in filtered["items"]] == ["Red Fort"]


def test_generate_route_flow(api_client: TestClient):
    assert api_client.post("/api/session/toggle/1").json()["can_generate"] is False
    state = api_client.post("/api/session/toggle/2").json()
    assert state["status"] == "idle"
    assert [item["id"] for item in state["selection"]] == [1, 2]

    state = api_client.post("/api/session/generate").json()
    assert state["status"] == "ready"
    assert state["route"] == [[28.60, 77.20], [28.65, 77.25]]
    assert state["metrics"]["segments"][0]["label"] == "A to B"
    assert state["estimate"]["base_time_minutes"] == 22
    assert state["estimate"]["traffic_description"] == "Moderate"

    estimate = api_client.get("/api/session/estimate").json()
    # base 22 at traffic 50 -> 22 * 1.15 = 25.3
    assert estimate["duration_minutes"] == 25
    assert estimate["duration_text"] == "0 hours 25 minutes"


def test_update_parameters_partially(api_client: TestClient):
    api_client.post("/api/session/toggle/1")
    api_client.post("/api/session/toggle/2")
    api_client.post("/api/session/generate")

    state = api_client.patch("/api/session/parameters", json={"weather": "rain"}).json()

    assert state["parameters"] == {"traffic_level": 50, "weather": "rain", "day_type": "weekday"}
    assert state["estimate"]["base_time_minutes"] == 22
    # 22 * 1.15 * 1.1 = 27.83
    assert state["estimate"]["duration_minutes"] == 28


def test_update_parameters_validation(api_client: TestClient):
    assert api_client.patch("/api/session/parameters", json={"traffic_level": 150}).status_code == 422
    assert api_client.patch("/api/session/parameters", json={"weather": "snow"}).status_code == 422
    assert api_client.patch("/api/session/parameters", json={"traffic_level": 50.5}).status_code == 422
    assert api_client.patch("/api/session/parameters", json={"traffic_level": True}).status_code == 422


def test_generate_with_single_selection_is_noop(api_client: TestClient):
    api_client.post("/api/session/toggle/1")

    state = api_client.post("/api/session/generate").json()

    assert state["status"] == "idle"
    assert state["route"] == []
    assert api_client.get("/api/session/estimate").status_code == 409


def test_toggle_unknown_location(api_client: TestClient):
    assert api_client.post("/api/session/toggle/42").status_code == 404


def test_generate_failure_is_reported_in_state():
    client = TestClient(create_app(catalog=_catalog(), provider=FailingProvider()))
    client.post("/api/session/toggle/1")
    client.post("/api/session/toggle/3")

    state = client.post("/api/session/generate").json()

    assert state["status"] == "failed"
    assert state["error"]
    assert state["estimate"] is None


def test_route_geojson(api_client: TestClient):
    api_client.post("/api/session/toggle/1")
    api_client.post("/api/session/toggle/2")
    api_client.post("/api/session/generate")

    collection = api_client.get("/api/session/route.geojson").json()

    assert collection["type"] == "FeatureCollection"
    line, first, second = collection["features"]
    assert line["geometry"]["coordinates"] == [[77.20, 28.60], [77.25, 28.65]]
    assert first["properties"]["sequence"] == 1
    assert second["properties"]["name"] == "B"


def test_traffic_profile(api_client: TestClient):
    profile = api_client.get("/api/session/traffic-profile", params={"seed": 3}).json()

    assert len(profile) == 24
    assert profile == api_client.get("/api/session/traffic-profile", params={"seed": 3}).json()
