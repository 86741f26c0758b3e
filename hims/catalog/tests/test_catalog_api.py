# hims/catalog/tests/test_catalog_api.py
from decimal import Decimal

import pytest

from hims.catalog.models import BioReference, Service
from hims.common.constants import ServiceApplicable, ServiceHead
from hims.conftest import make_service

pytestmark = pytest.mark.django_db


def test_service_code_is_uppercased_and_unique(api_client):
    payload = {"name": "Blood Sugar", "code": "bsf_1", "head": "Pathology", "rate": "150.00"}
    r = api_client.post("/api/v1/services/", payload, format="json")
    assert r.status_code == 201, r.data
    assert r.data["data"]["code"] == "BSF_1"
    assert r.data["data"]["is_lab_service"] is True

    r = api_client.post("/api/v1/services/", {**payload, "code": "BSF_1"}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Service with this code already exists"


def test_service_code_format(api_client):
    r = api_client.post("/api/v1/services/", {"name": "Bad", "code": "A-1", "head": "Other", "rate": "1"}, format="json")
    assert r.status_code == 400
    assert "uppercase letters" in r.data["message"]


def test_service_links_parameters(api_client, hb_parameter):
    r = api_client.post(
        "/api/v1/services/",
        {"name": "Hb", "code": "HB", "head": "Pathology", "rate": "80", "linked_parameter_ids": [str(hb_parameter.id)]},
        format="json",
    )
    assert r.status_code == 201, r.data
    assert r.data["data"]["linked_parameter_ids"] == [str(hb_parameter.id)]


def test_dropdown_filters_by_applicability(api_client, consultation_service, ipd_only_service):
    make_service("OPD_DRESSING", ServiceHead.PROCEDURE, applicable_on=ServiceApplicable.OPD)

    r = api_client.get("/api/v1/services/dropdown-list/", {"applicable": "OPD"})
    codes = {row["label"].split("(")[-1].rstrip(")") for row in r.data["data"]}
    assert codes == {"CONSULT", "OPD_DRESSING"}

    r = api_client.get("/api/v1/services/dropdown-list/", {"applicable": "IPD"})
    codes = {row["label"].split("(")[-1].rstrip(")") for row in r.data["data"]}
    assert codes == {"CONSULT", "ROOM_RENT"}


def test_inactive_services_are_hidden_from_dropdown(api_client, consultation_service):
    Service.objects.filter(id=consultation_service.id).update(status="inactive")
    r = api_client.get("/api/v1/services/dropdown-list/")
    assert r.data["data"] == []


def test_lab_test_duplicate_name_per_report_type(client_for_role):
    tech = client_for_role("Technician")
    payload = {"test_name": "Lipid Profile", "report_type": "Biochemistry", "format_type": "Tabular"}
    assert tech.post("/api/v1/lab-tests/", payload, format="json").status_code == 201

    r = tech.post("/api/v1/lab-tests/", {**payload, "test_name": "lipid profile"}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Lab test with this name and report type already exists"


def test_lab_test_linking(api_client, consultation_service, pathology_service):
    test_id = api_client.post(
        "/api/v1/lab-tests/",
        {"test_name": "CBC", "report_type": "Haematology", "format_type": "Tabular"},
        format="json",
    ).data["data"]["id"]

    r = api_client.put(f"/api/v1/lab-tests/{test_id}/linking/", {"service_ids": [str(pathology_service.id)]}, format="json")
    assert r.status_code == 200, r.data

    r = api_client.get(f"/api/v1/lab-tests/{test_id}/linking/")
    rows = r.data["data"]
    assert rows[0]["id"] == str(pathology_service.id)
    assert rows[0]["is_linked"] is True
    assert [row["is_linked"] for row in rows[1:]] == [False]


def test_lab_test_linking_rejects_unknown_ids(api_client):
    import uuid

    test_id = api_client.post(
        "/api/v1/lab-tests/",
        {"test_name": "LFT", "report_type": "Biochemistry", "format_type": "Tabular"},
        format="json",
    ).data["data"]["id"]
    r = api_client.put(f"/api/v1/lab-tests/{test_id}/linking/", {"service_ids": [str(uuid.uuid4())]}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Some serviceIds are invalid"


def test_parameter_with_references(api_client):
    r = api_client.post(
        "/api/v1/lab-parameters/",
        {
            "parameter_name": "TSH",
            "unit": "mIU/L",
            "bio_references": [
                {"age_from": "0", "age_to": "12", "age_type": "Month", "gender": "All", "min": "0.7", "max": "6.4"},
                {"age_from": "18", "age_to": "100", "age_type": "Year", "gender": "All", "min": "0.4", "max": "4.0"},
            ],
        },
        format="json",
    )
    assert r.status_code == 201, r.data
    param_id = r.data["data"]["id"]
    assert len(r.data["data"]["bio_references"]) == 2

    r = api_client.get(f"/api/v1/lab-parameters/{param_id}/reference-ranges/", {"age": "0.5", "gender": "Male"})
    assert r.status_code == 200
    assert [ref["age_type"] for ref in r.data["data"]] == ["Month"]

    r = api_client.get(f"/api/v1/lab-parameters/{param_id}/reference-ranges/", {"age": "-1"})
    assert r.status_code == 400


def test_reference_age_band_must_be_ordered(api_client):
    r = api_client.post(
        "/api/v1/lab-parameters/",
        {
            "parameter_name": "ESR",
            "bio_references": [{"age_from": "10", "age_to": "5", "age_type": "Year", "gender": "All"}],
        },
        format="json",
    )
    assert r.status_code == 400
    assert "Age to must be greater than or equal to age from" in r.data["message"]


def test_parameter_update_replaces_references(api_client, hb_parameter):
    r = api_client.patch(
        f"/api/v1/lab-parameters/{hb_parameter.id}/",
        {"bio_references": [{"age_from": "0", "age_to": "0", "age_type": "All", "gender": "All", "range": "11-16"}]},
        format="json",
    )
    assert r.status_code == 200, r.data
    refs = list(BioReference.objects.filter(parameter=hb_parameter))
    assert len(refs) == 1
    assert refs[0].display_range == "11-16"


def test_display_range_drops_stored_decimal_padding(hb_parameter):
    BioReference.objects.create(
        parameter=hb_parameter, age_from=0, age_to=12, age_type="Month", gender="All", min="0.7", max="100"
    )
    stored = BioReference.objects.get(parameter=hb_parameter, age_type="Month")
    assert stored.min == Decimal("0.700")
    assert stored.display_range == "0.7-100"

    male = BioReference.objects.get(parameter=hb_parameter, gender="Male")
    assert male.display_range == "13-17"
