import json

from cafe_api import crud
from cafe_api.init_db import init_db


def test_cafes_listing(client, make_cafe):
    first = make_cafe("Blue Bottle", images=["/img/1.jpg", "/img/2.jpg"])
    second = make_cafe("Tartine")

    cafes = client.get("/api/cafes").json()
    assert [c["id"] for c in cafes] == [first, second]
    assert cafes[0]["images"] == ["/img/1.jpg", "/img/2.jpg"]
    assert cafes[1]["images"] == []
    assert client.get(f"/api/cafes/{second}").json()["name"] == "Tartine"
    assert client.get("/api/cafes/999").status_code == 404


def test_health(client):
    body = client.get("/").json()
    assert body["ok"] is True
    assert "X-Request-ID" in client.get("/").headers


def test_init_db_seeds_cafes_once(tmp_path, db):
    seed = tmp_path / "cafes.json"
    seed.write_text(json.dumps([
        {"name": "Blue Bottle", "location": "Oakland", "images": ["/img/bb.jpg"]},
        {"name": "Tartine", "description": "Bakery"},
    ]))

    assert init_db(str(seed)) == 2
    assert init_db(str(seed)) == 0
    assert [(c.name, c.images) for c in crud.get_cafes(db)] == [
        ("Blue Bottle", ["/img/bb.jpg"]),
        ("Tartine", []),
    ]


def test_request_id_is_echoed(client):
    resp = client.get("/api/cafes", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
