# hims/radiology/apps.py
from django.apps import AppConfig


class RadiologyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hims.radiology"
