# hims/iam/management/commands/ensure_admin.py

from django.core.management.base import BaseCommand, CommandError

from hims.common.constants import Role
from hims.iam.models import User


class Command(BaseCommand):
    help = "Ensure an Admin account exists for the given email (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--password", required=True)

    def handle(self, *args, **options):
        email = options["email"].strip().lower()
        if not email:
            raise CommandError("--email must not be blank")

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            User.objects.create_superuser(email=email, password=options["password"])
            self.stdout.write(self.style.SUCCESS(f"Admin created: {email}"))
            return

        user.role = Role.ADMIN
        user.is_staff = True
        user.is_superuser = True
        user.is_active = True
        user.set_password(options["password"])
        user.save()
        self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email}"))
