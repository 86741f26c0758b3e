# hims/radiology/models.py
from django.conf import settings
from django.db import models

from hims.common.models import BaseModel


class RadiologyTemplate(BaseModel):
    """
    Report boilerplate. Radiology services point at it through
    Service.radiology_template.
    """
    template_name = models.CharField(max_length=200, unique=True)
    template_content = models.TextField()
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    updated_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")

    class Meta:
        db_table = "radiology_template"
        ordering = ["template_name"]

    def __str__(self) -> str:
        return self.template_name


class RadiologyReport(BaseModel):
    order_test = models.OneToOneField("lab.LabOrderTest", on_delete=models.CASCADE, related_name="radiology_report")
    template = models.ForeignKey(RadiologyTemplate, null=True, blank=True, on_delete=models.SET_NULL, related_name="reports")
    findings = models.TextField(blank=True)
    impression = models.TextField(blank=True)
    methodology = models.TextField(blank=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    authorized_at = models.DateTimeField(null=True, blank=True)
    authorized_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )

    class Meta:
        db_table = "radiology_report"

    def __str__(self) -> str:
        return f"Radiology report {self.order_test_id}"
