# hims/wards/tests/test_wards_api.py
import pytest

from hims.wards.models import Bed

pytestmark = pytest.mark.django_db


def test_floor_names_are_unique_case_insensitive(client_for_role):
    desk = client_for_role("Receptionist")
    assert desk.post("/api/v1/floors/", {"name": "First Floor"}, format="json").status_code == 201

    r = desk.post("/api/v1/floors/", {"name": "first floor"}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Floor with this name already exists"


def test_bed_range_creation(api_client, ward):
    r = api_client.post(
        "/api/v1/beds/",
        {"bedNumberFrom": 1, "bedNumberTo": 5, "ward_id": str(ward.id), "floor_id": str(ward.floor_id)},
        format="json",
    )
    assert r.status_code == 201, r.data
    assert len(r.data["data"]) == 5
    assert set(Bed.objects.filter(ward=ward).values_list("bed_number", flat=True)) == {"1", "2", "3", "4", "5"}
    assert all(b["type"] == "general" and b["status"] == "available" for b in r.data["data"])


def test_bed_range_collision_creates_nothing(api_client, ward):
    Bed.objects.create(bed_number="3", ward=ward, floor=ward.floor, type=ward.type)

    r = api_client.post(
        "/api/v1/beds/",
        {"bedNumberFrom": 1, "bedNumberTo": 4, "ward_id": str(ward.id), "floor_id": str(ward.floor_id)},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Bed with this number already exists: 3"
    assert Bed.objects.filter(ward=ward).count() == 1


def test_bed_range_must_be_ordered_and_capped(api_client, ward):
    base = {"ward_id": str(ward.id), "floor_id": str(ward.floor_id)}
    r = api_client.post("/api/v1/beds/", {**base, "bedNumberFrom": 5, "bedNumberTo": 2}, format="json")
    assert r.status_code == 400
    assert "greater than or equal" in r.data["message"]

    r = api_client.post("/api/v1/beds/", {**base, "bedNumberFrom": 1, "bedNumberTo": 1000}, format="json")
    assert r.status_code == 400


def test_bed_range_checks_floor(api_client, ward):
    from hims.wards.models import Floor

    other = Floor.objects.create(name="Second Floor")
    r = api_client.post(
        "/api/v1/beds/",
        {"bedNumberFrom": 1, "bedNumberTo": 2, "ward_id": str(ward.id), "floor_id": str(other.id)},
        format="json",
    )
    assert r.status_code == 400
    assert r.data["message"] == "Ward does not belong to this floor"


def test_ward_list_counts_beds(api_client, bed, second_bed):
    second_bed.status = "maintenance"
    second_bed.save()

    r = api_client.get("/api/v1/wards/")
    row = r.data["data"]["items"][0]
    assert row["total_beds"] == 2
    assert row["available_beds"] == 1


def test_occupied_bed_cannot_be_deleted_or_freed(api_client, bed, patient):
    bed.status = "occupied"
    bed.patient = patient
    bed.save()

    r = api_client.delete(f"/api/v1/beds/{bed.id}/")
    assert r.status_code == 400
    assert r.data["message"] == "Occupied bed cannot be deleted"

    r = api_client.patch(f"/api/v1/beds/{bed.id}/", {"status": "available"}, format="json")
    assert r.status_code == 400


def test_ward_with_beds_cannot_be_deleted(api_client, bed):
    r = api_client.delete(f"/api/v1/wards/{bed.ward_id}/")
    assert r.status_code == 400
    assert r.data["message"] == "Ward has beds and cannot be deleted"


def test_bed_dropdown_filters_by_status(client_for_role, bed, second_bed):
    second_bed.status = "maintenance"
    second_bed.save()

    r = client_for_role("Doctor").get("/api/v1/beds/dropdown-list/", {"status": "available"})
    assert [o["value"] for o in r.data["data"]] == [str(bed.id)]
