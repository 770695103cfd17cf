"""
Integration tests for the HTTP surface (/api/v1).
"""
from pathlib import Path

from app.config import settings
from app.services.fuel_service import fuel_service
from app.services.vehicle_service import vehicle_service
from app.schemas.vehicle import VehicleCreateRequest
from app.utils.exceptions import ValidationException

API = "/api/v1"


def _jpeg(name: str = "car one.jpg"):
    return ("images", (name, b"\xff\xd8\xff fake jpeg", "image/jpeg"))


class TestAuthRoutes:
    """Tests for /auth."""

    def test_login_success(self, client, create_user):
        user_id, email, password = create_user(role="owner", email="Owner@Stand.pt")
        resp = client.post(f"{API}/auth/login", json={"email": "owner@stand.pt", "password": password})
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        assert data["accessToken"]
        assert data["tokenType"] == "Bearer"
        assert data["user"] == {"id": user_id, "name": "Test User", "email": "Owner@Stand.pt", "role": "owner"}

    def test_unknown_email_and_wrong_password_look_the_same(self, client, create_user):
        _, email, _ = create_user()
        wrong = client.post(f"{API}/auth/login", json={"email": email, "password": "nope"})
        unknown = client.post(f"{API}/auth/login", json={"email": "ghost@stand.pt", "password": "nope"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["message"] == "Invalid credentials"

    def test_malformed_email_is_validation_error(self, client):
        resp = client.post(f"{API}/auth/login", json={"email": "not-an-email", "password": "x"})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_me_requires_token(self, client):
        assert client.get(f"{API}/auth/me").status_code == 401
        bad = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"})
        assert bad.status_code == 401

    def test_me_returns_decrypted_email(self, client, create_user):
        _, email, password = create_user(role="partner")
        token = client.post(f"{API}/auth/login", json={"email": email, "password": password}
                            ).json()["data"]["accessToken"]
        resp = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json()["data"]["email"] == email


class TestUserRoutes:
    """Tests for /users."""

    def test_owner_lists_users_without_hashes(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        resp = client.get(f"{API}/users", headers=headers)
        assert resp.status_code == 200
        users = resp.json()["data"]
        assert len(users) == 1
        assert "password_hash" not in users[0]

    def test_partner_is_forbidden(self, client, auth_headers):
        headers, _ = auth_headers("partner")
        resp = client.get(f"{API}/users", headers=headers)
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "FORBIDDEN"


class TestVehicleRoutes:
    """Tests for /vehicles."""

    def test_public_list_and_filters(self, client, db, create_user):
        owner_id, _, _ = create_user()
        vehicle_service.create_vehicle(db, VehicleCreateRequest(title="Civic", hp="150", fuel="Gasolina"), owner_id)
        vehicle_service.create_vehicle(db, VehicleCreateRequest(title="M3", hp="300", fuel="Gasolina"), owner_id)
        vehicle_service.create_vehicle(db, VehicleCreateRequest(title="Leaf", fuel="Eletrico"), owner_id)

        resp = client.get(f"{API}/vehicles", params={"hp_min": 200, "hp_max": 300})
        assert resp.status_code == 200
        assert [v["title"] for v in resp.json()["data"]] == ["M3"]

        resp = client.get(f"{API}/vehicles", params={"fuel": "gasolina", "q": "civ"})
        assert [v["title"] for v in resp.json()["data"]] == ["Civic"]

    def test_get_missing_vehicle(self, client):
        resp = client.get(f"{API}/vehicles/999")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

    def test_create_requires_authentication(self, client):
        resp = client.post(f"{API}/vehicles", data={"title": "Civic"})
        assert resp.status_code == 401

    def test_create_with_images(self, client, auth_headers):
        headers, user_id = auth_headers("partner")
        resp = client.post(
            f"{API}/vehicles",
            data={"title": "Civic", "price": "15000", "year": "2020", "hp": ""},
            files=[_jpeg("car one.jpg"), _jpeg("rear.png")],
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
        vehicle_id = resp.json()["data"]["id"]

        vehicle = client.get(f"{API}/vehicles/{vehicle_id}").json()["data"]
        assert vehicle["owner_id"] == user_id
        assert vehicle["price"] == 15000
        assert vehicle["year"] == 2020
        assert vehicle["hp"] is None
        assert len(vehicle["images"]) == 2
        assert vehicle["images"][0].startswith(f"{settings.UPLOAD_URL_PREFIX}/")
        assert vehicle["images"][0].endswith("-car-one.jpg")

        stored = Path(settings.UPLOAD_DIR) / vehicle["images"][0].rsplit("/", 1)[1]
        assert stored.exists()
        served = client.get(vehicle["images"][0])
        assert served.status_code == 200

        listed = client.get(f"{API}/vehicles").json()["data"]
        assert listed[0]["image"] == vehicle["images"][0]

    def test_non_image_upload_rejected(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        resp = client.post(
            f"{API}/vehicles",
            data={"title": "Civic"},
            files=[("images", ("notes.txt", b"hello", "text/plain"))],
            headers=headers,
        )
        assert resp.status_code == 400
        assert client.get(f"{API}/vehicles").json()["data"] == []

    def test_mixed_upload_writes_nothing(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        before = set(Path(settings.UPLOAD_DIR).iterdir())
        resp = client.post(
            f"{API}/vehicles",
            data={"title": "Civic"},
            files=[_jpeg("ok.jpg"), ("images", ("notes.txt", b"hello", "text/plain"))],
            headers=headers,
        )
        assert resp.status_code == 400
        assert set(Path(settings.UPLOAD_DIR).iterdir()) == before

    def test_failed_save_removes_stored_images(self, client, auth_headers, monkeypatch):
        headers, _ = auth_headers("owner")
        before = set(Path(settings.UPLOAD_DIR).iterdir())

        def failing_create(*args, **kwargs):
            raise ValidationException("Vehicle could not be saved")

        monkeypatch.setattr(vehicle_service, "create_vehicle", failing_create)
        resp = client.post(f"{API}/vehicles", data={"title": "Civic"}, files=[_jpeg()], headers=headers)
        assert resp.status_code == 400
        assert set(Path(settings.UPLOAD_DIR).iterdir()) == before

    def test_oversized_numbers_are_unknown(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        resp = client.post(f"{API}/vehicles", data={"title": "X", "hp": "99999999999999999999", "year": "2020"},
                           headers=headers)
        assert resp.status_code == 201, resp.text
        vehicle_id = resp.json()["data"]["id"]

        resp = client.put(f"{API}/vehicles/{vehicle_id}", data={"year": "99999999999999999999"}, headers=headers)
        assert resp.status_code == 200, resp.text
        vehicle = resp.json()["data"]
        assert vehicle["hp"] is None
        assert vehicle["year"] is None

    def test_out_of_range_filter_is_validation_error(self, client):
        resp = client.get(f"{API}/vehicles", params={"hp_min": "99999999999999999999"})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
        assert client.get(f"{API}/vehicles", params={"disp_max": -1}).status_code == 422

    def test_fuel_longer_than_column_rejected(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        resp = client.post(f"{API}/vehicles", data={"title": "X", "fuel": "x" * 65}, headers=headers)
        assert resp.status_code == 422
        assert client.get(f"{API}/vehicles").json()["data"] == []

    def test_partial_update(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        vehicle_id = client.post(f"{API}/vehicles", data={"title": "Civic", "hp": "120", "price": "9000"},
                                 headers=headers).json()["data"]["id"]

        resp = client.put(f"{API}/vehicles/{vehicle_id}", data={"hp": "150"}, headers=headers)
        assert resp.status_code == 200, resp.text
        vehicle = resp.json()["data"]
        assert vehicle["hp"] == 150
        assert vehicle["title"] == "Civic"
        assert vehicle["price"] == 9000

    def test_partner_cannot_touch_another_partners_vehicle(self, client, auth_headers):
        alice, _ = auth_headers("partner")
        bob, _ = auth_headers("partner")
        owner, _ = auth_headers("owner")
        vehicle_id = client.post(f"{API}/vehicles", data={"title": "Clio"}, headers=alice).json()["data"]["id"]

        assert client.put(f"{API}/vehicles/{vehicle_id}", data={"title": "X"}, headers=bob).status_code == 403
        assert client.delete(f"{API}/vehicles/{vehicle_id}", headers=bob).status_code == 403
        assert client.put(f"{API}/vehicles/{vehicle_id}", data={"title": "Clio RS"}, headers=alice).status_code == 200
        assert client.put(f"{API}/vehicles/{vehicle_id}", data={"price": "100"}, headers=owner).status_code == 200

        vehicle = client.get(f"{API}/vehicles/{vehicle_id}").json()["data"]
        assert vehicle["title"] == "Clio RS"
        assert vehicle["price"] == 100

    def test_delete(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        vehicle_id = client.post(f"{API}/vehicles", data={"title": "Golf"}, files=[_jpeg()],
                                 headers=headers).json()["data"]["id"]

        resp = client.delete(f"{API}/vehicles/{vehicle_id}", headers=headers)
        assert resp.status_code == 200
        assert client.get(f"{API}/vehicles/{vehicle_id}").status_code == 404
        assert client.delete(f"{API}/vehicles/{vehicle_id}", headers=headers).status_code == 404


class TestFuelRoutes:
    """Tests for /fuels."""

    def test_list_is_public_and_sorted(self, client, db):
        fuel_service.create_fuel(db, "Gasolina")
        fuel_service.create_fuel(db, "Diesel")
        resp = client.get(f"{API}/fuels")
        assert resp.status_code == 200
        assert [f["name"] for f in resp.json()["data"]] == ["Diesel", "Gasolina"]

    def test_create_is_idempotent(self, client, auth_headers):
        headers, _ = auth_headers("partner")
        first = client.post(f"{API}/fuels", json={"name": "Gasolina"}, headers=headers)
        second = client.post(f"{API}/fuels", json={"name": "Gasolina"}, headers=headers)
        assert first.status_code == second.status_code == 201
        assert first.json()["data"]["id"] == second.json()["data"]["id"]
        assert len(client.get(f"{API}/fuels").json()["data"]) == 1

    def test_create_requires_staff_token(self, client):
        assert client.post(f"{API}/fuels", json={"name": "Diesel"}).status_code == 401

    def test_blank_name_rejected(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        assert client.post(f"{API}/fuels", json={"name": "  "}, headers=headers).status_code == 422

    def test_name_longer_than_column_rejected(self, client, auth_headers):
        headers, _ = auth_headers("owner")
        assert client.post(f"{API}/fuels", json={"name": "x" * 65}, headers=headers).status_code == 422
        assert client.post(f"{API}/fuels", json={"name": "x" * 64}, headers=headers).status_code == 201
