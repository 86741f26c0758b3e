# hims/catalog/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from rest_framework.exceptions import NotFound, ValidationError

from hims.audit.services import AuditService
from hims.catalog.models import BioReference, LabParameter, LabTest, Service, ServiceType

logger = logging.getLogger(__name__)

SERVICE_TYPE_EXISTS = "Service type with this name already exists"
SERVICE_CODE_EXISTS = "Service with this code already exists"
LAB_TEST_EXISTS = "Lab test with this name and report type already exists"
SOME_SERVICE_IDS_INVALID = "Some serviceIds are invalid"
SOME_PARAMETER_IDS_INVALID = "Some parameterIds are invalid"


def _get_or_404(model, obj_id, message: str):
    obj = model.objects.select_for_update().filter(id=obj_id).first()
    if obj is None:
        raise NotFound(message)
    return obj


def _apply(obj, data: dict, allowed: set[str]) -> list[str]:
    changed = []
    for k, v in (data or {}).items():
        if k in allowed:
            setattr(obj, k, v)
            changed.append(k)
    return sorted(changed)


def _log(event_code: str, entity_type: str, entity_id, actor_user_id, **metadata) -> None:
    AuditService.log(
        event_code=event_code,
        entity_type=entity_type,
        entity_id=entity_id,
        actor_user_id=actor_user_id,
        metadata=metadata or None,
    )


class ServiceTypeService:
    FIELDS = {"name", "service_head"}

    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, name: str, service_head: str) -> ServiceType:
        if ServiceType.objects.filter(name__iexact=name.strip()).exists():
            raise ValidationError(SERVICE_TYPE_EXISTS)
        try:
            st = ServiceType.objects.create(name=name.strip(), service_head=service_head)
        except IntegrityError:
            raise ValidationError(SERVICE_TYPE_EXISTS)
        _log("service_type.created", "ServiceType", st.id, actor_user_id, name=st.name)
        return st

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, service_type_id: UUID, data: dict) -> ServiceType:
        st = _get_or_404(ServiceType, service_type_id, "Service Type Not Found")
        if "name" in data and ServiceType.objects.filter(name__iexact=data["name"].strip()).exclude(id=st.id).exists():
            raise ValidationError(SERVICE_TYPE_EXISTS)
        changed = _apply(st, data, ServiceTypeService.FIELDS)
        try:
            st.save()
        except IntegrityError:
            raise ValidationError(SERVICE_TYPE_EXISTS)
        _log("service_type.updated", "ServiceType", st.id, actor_user_id, updated_fields=changed)
        return st

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, service_type_id: UUID) -> None:
        st = _get_or_404(ServiceType, service_type_id, "Service Type Not Found")
        st.delete()
        _log("service_type.deleted", "ServiceType", service_type_id, actor_user_id)


class CatalogService:
    """
    Billable services. Lab heads (Pathology/Radiology) carry linked parameters.
    """
    FIELDS = {"name", "code", "description", "service_type_id", "head", "rate", "status", "applicable_on"}

    @staticmethod
    def _set_parameters(service: Service, parameter_ids) -> None:
        if parameter_ids is None:
            return
        params = list(LabParameter.objects.filter(id__in=parameter_ids))
        if len(params) != len(set(parameter_ids)):
            raise ValidationError(SOME_PARAMETER_IDS_INVALID)
        service.linked_parameters.set(params)

    @staticmethod
    def _check_service_type(service_type_id) -> None:
        if service_type_id and not ServiceType.objects.filter(id=service_type_id).exists():
            raise NotFound("Service Type Not Found")

    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, linked_parameter_ids=None, **data) -> Service:
        fields = {k: v for k, v in data.items() if k in CatalogService.FIELDS}
        fields["code"] = fields["code"].strip().upper()
        if Service.objects.filter(code=fields["code"]).exists():
            raise ValidationError(SERVICE_CODE_EXISTS)
        CatalogService._check_service_type(fields.get("service_type_id"))

        try:
            service = Service.objects.create(**fields)
        except IntegrityError:
            raise ValidationError(SERVICE_CODE_EXISTS)
        CatalogService._set_parameters(service, linked_parameter_ids)

        _log("service.created", "Service", service.id, actor_user_id, code=service.code)
        logger.info("Service created code=%s head=%s", service.code, service.head)
        return service

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, service_id: UUID, data: dict) -> Service:
        service = _get_or_404(Service, service_id, "Service Not Found")
        data = dict(data or {})
        if "code" in data:
            data["code"] = data["code"].strip().upper()
            if Service.objects.filter(code=data["code"]).exclude(id=service.id).exists():
                raise ValidationError(SERVICE_CODE_EXISTS)
        CatalogService._check_service_type(data.get("service_type_id"))

        changed = _apply(service, data, CatalogService.FIELDS)
        try:
            service.save()
        except IntegrityError:
            raise ValidationError(SERVICE_CODE_EXISTS)
        CatalogService._set_parameters(service, data.get("linked_parameter_ids"))

        _log("service.updated", "Service", service.id, actor_user_id, updated_fields=changed)
        return service

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, service_id: UUID) -> None:
        service = _get_or_404(Service, service_id, "Service Not Found")
        try:
            service.delete()
        except ProtectedError:
            raise ValidationError("Service is used in bills and cannot be deleted")
        _log("service.deleted", "Service", service_id, actor_user_id)


class LabTestService:
    FIELDS = {"test_name", "report_type", "format_type", "sample_type", "methodology", "is_active", "is_printable"}

    @staticmethod
    def _check_duplicate(test_name: str, report_type: str, exclude_id=None) -> None:
        qs = LabTest.objects.filter(test_name__iexact=test_name, report_type=report_type)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        if qs.exists():
            raise ValidationError(LAB_TEST_EXISTS)

    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, linked_service_ids=None, **data) -> LabTest:
        fields = {k: v for k, v in data.items() if k in LabTestService.FIELDS}
        LabTestService._check_duplicate(fields["test_name"], fields["report_type"])
        try:
            test = LabTest.objects.create(**fields)
        except IntegrityError:
            raise ValidationError(LAB_TEST_EXISTS)
        if linked_service_ids is not None:
            LabTestService._set_services(test, linked_service_ids)

        _log("lab_test.created", "LabTest", test.id, actor_user_id, test_name=test.test_name)
        return test

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, lab_test_id: UUID, data: dict) -> LabTest:
        test = _get_or_404(LabTest, lab_test_id, "Lab test Not Found")
        LabTestService._check_duplicate(
            data.get("test_name", test.test_name),
            data.get("report_type", test.report_type),
            exclude_id=test.id,
        )
        changed = _apply(test, data, LabTestService.FIELDS)
        try:
            test.save()
        except IntegrityError:
            raise ValidationError(LAB_TEST_EXISTS)
        if data.get("linked_service_ids") is not None:
            LabTestService._set_services(test, data["linked_service_ids"])
            changed.append("linked_service_ids")

        _log("lab_test.updated", "LabTest", test.id, actor_user_id, updated_fields=changed)
        return test

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, lab_test_id: UUID) -> None:
        test = _get_or_404(LabTest, lab_test_id, "Lab test Not Found")
        test.delete()
        _log("lab_test.deleted", "LabTest", lab_test_id, actor_user_id)

    @staticmethod
    def _set_services(test: LabTest, service_ids) -> None:
        ids = set(service_ids)
        services = list(Service.objects.filter(id__in=ids))
        if len(services) != len(ids):
            raise ValidationError(SOME_SERVICE_IDS_INVALID)
        test.linked_services.set(services)

    @staticmethod
    @transaction.atomic
    def update_linked_services(*, actor_user_id: int | None, lab_test_id: UUID, service_ids: list) -> LabTest:
        test = _get_or_404(LabTest, lab_test_id, "Lab test not found")
        LabTestService._set_services(test, service_ids)
        _log(
            "lab_test.services_linked",
            "LabTest",
            test.id,
            actor_user_id,
            service_ids=[str(s) for s in service_ids],
        )
        return test


class LabParameterService:
    FIELDS = {
        "test_id",
        "parameter_name",
        "unit",
        "report_type",
        "format_type",
        "sample_type",
        "is_printable",
        "interpretation_type",
        "interpretation_male",
        "interpretation_female",
        "interpretation_both",
        "methodology",
        "is_active",
    }

    @staticmethod
    def _replace_references(parameter: LabParameter, references: list[dict]) -> None:
        parameter.bio_references.all().delete()
        BioReference.objects.bulk_create(
            [BioReference(parameter=parameter, **ref) for ref in references]
        )

    @staticmethod
    def _check_test(test_id) -> None:
        if test_id and not LabTest.objects.filter(id=test_id).exists():
            raise NotFound("Lab test Not Found")

    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int | None, bio_references=None, **data) -> LabParameter:
        fields = {k: v for k, v in data.items() if k in LabParameterService.FIELDS}
        LabParameterService._check_test(fields.get("test_id"))
        parameter = LabParameter.objects.create(**fields)
        LabParameterService._replace_references(parameter, bio_references or [])

        _log("lab_parameter.created", "LabParameter", parameter.id, actor_user_id, name=parameter.parameter_name)
        return parameter

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, parameter_id: UUID, data: dict) -> LabParameter:
        parameter = _get_or_404(LabParameter, parameter_id, "Lab Parameter not found")
        LabParameterService._check_test(data.get("test_id"))
        changed = _apply(parameter, data, LabParameterService.FIELDS)
        parameter.save()
        if "bio_references" in data:
            LabParameterService._replace_references(parameter, data["bio_references"] or [])
            changed.append("bio_references")

        _log("lab_parameter.updated", "LabParameter", parameter.id, actor_user_id, updated_fields=changed)
        return parameter

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, parameter_id: UUID) -> None:
        parameter = _get_or_404(LabParameter, parameter_id, "Lab Parameter not found")
        try:
            parameter.delete()
        except ProtectedError:
            raise ValidationError("Lab Parameter has recorded results and cannot be deleted")
        _log("lab_parameter.deleted", "LabParameter", parameter_id, actor_user_id)
