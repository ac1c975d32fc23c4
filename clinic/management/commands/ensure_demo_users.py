# clinic/management/commands/ensure_demo_users.py
from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from clinic.models import Role, User

DEFAULT_PASSWORD = "healthwave123"


class Command(BaseCommand):
    help = "Ensure one demo user per role exists (<role>@healthwave), idempotent."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=DEFAULT_PASSWORD)

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for role in Role:
            username = f"{role.value}@healthwave"
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": password, "is_active": True,
                          "email": f"{role.value}@healthwave.example", "is_staff": role is Role.ADMIN},
            )
            if not created:
                # reset password, role and activation
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role.value})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
