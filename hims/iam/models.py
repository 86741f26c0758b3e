# hims/iam/models.py
from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models

from hims.common.constants import Role


class UserManager(DjangoUserManager):
    """
    Email is the login; username mirrors it unless given explicitly.
    """

    def create_user(self, email=None, password=None, **extra_fields):
        username = extra_fields.pop("username", None) or email
        return super().create_user(username, email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.ADMIN)
        username = extra_fields.pop("username", None) or email
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    email = models.EmailField(unique=True)
    mobile_number = models.CharField(max_length=15, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.RECEPTIONIST, db_index=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    objects = UserManager()

    class Meta:
        db_table = "iam_user"

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"
