# hims/billing/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from hims.billing.models import IpdAdmission, IpdItem, OpdBill, OpdBillItem
from hims.billing.totals import compute_totals
from hims.catalog.api.serializers import ServiceBriefSerializer
from hims.common.constants import PatientStatus, PaymentMode, Priority
from hims.doctors.api.serializers import DoctorBriefSerializer
from hims.patients.api.serializers import PatientBriefSerializer
from hims.wards.models import Bed


def _money(**kwargs) -> serializers.DecimalField:
    return serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"), **kwargs)


class BillLineSerializer(serializers.Serializer):
    service_id = serializers.UUIDField()
    price = _money()
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    amount = _money(required=False, allow_null=True)


class _TotalsMixin:
    # lines may be absent on partial IPD updates; totals are then checked by the service
    def validate(self, attrs):
        attrs = super().validate(attrs)
        if "services" in attrs:
            compute_totals(attrs["services"], discount=attrs.get("discount", 0), paid=attrs.get("paid_amount", 0))
        return attrs


# --- OPD ---

class OpdBillCreateSerializer(_TotalsMixin, serializers.Serializer):
    patient_id = serializers.UUIDField()
    consultant_doctor_id = serializers.UUIDField()
    services = BillLineSerializer(many=True, allow_empty=False)
    payment_mode = serializers.ChoiceField(choices=PaymentMode.choices)
    paid_amount = _money(required=False, default=Decimal("0"))
    discount = _money(required=False, default=Decimal("0"))
    referred_by = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    visit_note = serializers.CharField(required=False, allow_blank=True, default="")
    priority = serializers.ChoiceField(choices=Priority.choices, required=False, default=Priority.NORMAL)
    instructions = serializers.CharField(required=False, allow_blank=True, default="")
    bill_date = serializers.DateTimeField(required=False)


class OpdBillUpdateSerializer(serializers.Serializer):
    payment_mode = serializers.ChoiceField(choices=PaymentMode.choices, required=False)
    paid_amount = _money(required=False)
    discount = _money(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class OpdBillItemSerializer(serializers.ModelSerializer):
    service = ServiceBriefSerializer(read_only=True)

    class Meta:
        model = OpdBillItem
        fields = ["id", "service", "price", "quantity", "amount"]
        read_only_fields = fields


class OpdBillListSerializer(serializers.ModelSerializer):
    patient = PatientBriefSerializer(read_only=True)
    consultant_doctor = DoctorBriefSerializer(read_only=True)
    due_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OpdBill
        fields = [
            "id",
            "bill_id",
            "patient",
            "consultant_doctor",
            "payment_mode",
            "gross_amount",
            "discount",
            "net_amount",
            "paid_amount",
            "due_amount",
            "status",
            "bill_date",
        ]
        read_only_fields = fields


class OpdBillSerializer(OpdBillListSerializer):
    visit_id = serializers.UUIDField(read_only=True, allow_null=True)
    items = OpdBillItemSerializer(many=True, read_only=True)
    lab_order_ids = serializers.SerializerMethodField()

    class Meta(OpdBillListSerializer.Meta):
        fields = OpdBillListSerializer.Meta.fields + ["visit_id", "items", "lab_order_ids", "created_at", "updated_at"]
        read_only_fields = fields

    def get_lab_order_ids(self, obj) -> list[str]:
        return [str(o.id) for o in obj.lab_orders.all()]


# --- IPD ---

class IpdAdmissionCreateSerializer(_TotalsMixin, serializers.Serializer):
    patient_id = serializers.UUIDField()
    referring_doctor_id = serializers.UUIDField()
    bed_id = serializers.UUIDField()
    services = BillLineSerializer(many=True, required=False, default=list)
    discount = _money(required=False, default=Decimal("0"))
    paid_amount = _money(required=False, default=Decimal("0"))
    admitted_at = serializers.DateTimeField(required=False)
    priority = serializers.ChoiceField(choices=Priority.choices, required=False, default=Priority.NORMAL)
    instructions = serializers.CharField(required=False, allow_blank=True, default="")


class IpdAdmissionUpdateSerializer(_TotalsMixin, serializers.Serializer):
    referring_doctor_id = serializers.UUIDField(required=False)
    bed_id = serializers.UUIDField(required=False)
    patient_status = serializers.ChoiceField(choices=PatientStatus.choices, required=False)
    services = BillLineSerializer(many=True, required=False)
    discount = _money(required=False)
    paid_amount = _money(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return super().validate(attrs)


class IpdItemSerializer(serializers.ModelSerializer):
    service = ServiceBriefSerializer(read_only=True)

    class Meta:
        model = IpdItem
        fields = ["id", "service", "price", "quantity", "amount"]
        read_only_fields = fields


class AdmissionBedSerializer(serializers.ModelSerializer):
    ward_name = serializers.CharField(source="ward.name", read_only=True)

    class Meta:
        model = Bed
        fields = ["id", "bed_number", "ward_name", "type"]
        read_only_fields = fields


class IpdAdmissionListSerializer(serializers.ModelSerializer):
    patient = PatientBriefSerializer(read_only=True)
    referring_doctor = DoctorBriefSerializer(read_only=True)
    bed = AdmissionBedSerializer(read_only=True)

    class Meta:
        model = IpdAdmission
        fields = [
            "id",
            "bill_number",
            "patient",
            "referring_doctor",
            "bed",
            "patient_status",
            "admitted_at",
            "discharged_at",
            "total_amount",
            "discount",
            "net_amount",
            "paid_amount",
            "due_amount",
        ]
        read_only_fields = fields


class IpdAdmissionSerializer(IpdAdmissionListSerializer):
    visit_id = serializers.UUIDField(read_only=True, allow_null=True)
    items = IpdItemSerializer(many=True, read_only=True)
    lab_order_ids = serializers.SerializerMethodField()

    class Meta(IpdAdmissionListSerializer.Meta):
        fields = IpdAdmissionListSerializer.Meta.fields + ["visit_id", "items", "lab_order_ids", "created_at", "updated_at"]
        read_only_fields = fields

    def get_lab_order_ids(self, obj) -> list[str]:
        return [str(o.id) for o in obj.lab_orders.all()]
