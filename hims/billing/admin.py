# hims/billing/admin.py
from django.contrib import admin

from hims.billing.models import IpdAdmission, IpdItem, OpdBill, OpdBillItem


class OpdBillItemInline(admin.TabularInline):
    model = OpdBillItem
    extra = 0


class IpdItemInline(admin.TabularInline):
    model = IpdItem
    extra = 0


@admin.register(OpdBill)
class OpdBillAdmin(admin.ModelAdmin):
    list_display = ("bill_id", "patient", "consultant_doctor", "net_amount", "paid_amount", "status", "bill_date")
    list_filter = ("status", "payment_mode")
    search_fields = ("bill_id", "patient__name", "patient__uhid")
    readonly_fields = ("bill_id", "created_at", "updated_at")
    inlines = [OpdBillItemInline]
    ordering = ("-bill_date",)


@admin.register(IpdAdmission)
class IpdAdmissionAdmin(admin.ModelAdmin):
    list_display = ("bill_number", "patient", "referring_doctor", "bed", "patient_status", "net_amount", "due_amount")
    list_filter = ("patient_status",)
    search_fields = ("bill_number", "patient__name", "patient__uhid")
    readonly_fields = ("bill_number", "created_at", "updated_at")
    inlines = [IpdItemInline]
    ordering = ("-admitted_at",)
