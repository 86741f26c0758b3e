# hims/iam/services.py
from __future__ import annotations

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework_simplejwt.tokens import RefreshToken

from hims.audit.services import AuditService
from hims.iam.models import User

EMAIL_EXISTS = "User with this email already exists"


def issue_tokens(user: User) -> dict[str, str]:
    """
    Refresh + access pair; both carry the user's role claim.
    """
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


class UserService:
    @staticmethod
    @transaction.atomic
    def create_user(
        *,
        actor_user_id: int | None,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        mobile_number: str = "",
        role: str,
        is_active: bool = True,
    ) -> User:
        email = email.strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError(EMAIL_EXISTS)

        try:
            user = User.objects.create_user(
                email=email,
                password=password,
                first_name=first_name or "",
                last_name=last_name or "",
                mobile_number=mobile_number or "",
                role=role,
                is_active=is_active,
            )
        except IntegrityError:
            raise ValidationError(EMAIL_EXISTS)

        AuditService.log(
            event_code="user.created",
            entity_type="User",
            entity_id=user.pk,
            actor_user_id=actor_user_id,
            metadata={"email": email, "role": role},
        )
        return user

    @staticmethod
    @transaction.atomic
    def update_user(*, actor_user_id: int | None, user_id: int, data: dict) -> User:
        user = User.objects.select_for_update().filter(pk=user_id).first()
        if user is None:
            raise NotFound("User Not Found")

        allowed = {"email", "first_name", "last_name", "mobile_number", "role", "is_active"}
        updates = {k: v for k, v in (data or {}).items() if k in allowed}

        if "email" in updates:
            updates["email"] = updates["email"].strip().lower()
            if User.objects.filter(email__iexact=updates["email"]).exclude(pk=user.pk).exists():
                raise ValidationError(EMAIL_EXISTS)
            user.username = updates["email"]

        for k, v in updates.items():
            setattr(user, k, v)

        password = (data or {}).get("password")
        if password:
            user.set_password(password)

        try:
            user.save()
        except IntegrityError:
            raise ValidationError(EMAIL_EXISTS)

        AuditService.log(
            event_code="user.updated",
            entity_type="User",
            entity_id=user.pk,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return user

    @staticmethod
    @transaction.atomic
    def deactivate_user(*, actor_user_id: int | None, user_id: int) -> User:
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise NotFound("User Not Found")
        user.is_active = False
        user.save(update_fields=["is_active"])

        AuditService.log(
            event_code="user.deactivated",
            entity_type="User",
            entity_id=user.pk,
            actor_user_id=actor_user_id,
        )
        return user

