# clinic/management/commands/seed_users.py
from django.core.management.base import BaseCommand

from clinic.models import User

SEED_SET = [
    ("admin@medicore.local", "Admin User", User.Role.ADMIN),
    ("doctor@medicore.local", "Doctor User", User.Role.DOCTOR),
    ("reception@medicore.local", "Reception User", User.Role.RECEPTION),
    ("patient@medicore.local", "Patient User", User.Role.PATIENT),
]


class Command(BaseCommand):
    help = "Ensure one account per role exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="medicore123", help="password set on every seeded account")

    def handle(self, *args, **opts):
        password = opts["password"]
        for email, name, role in SEED_SET:
            u = User.objects.filter(email=email).first()
            if u is None:
                u = User.objects.create_user(email=email, password=password, name=name, role=role)
                state = "created"
            else:
                # reset password, role and active flag on re-runs
                u.set_password(password)
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active", "updated_at"])
                state = "updated"
            self.stdout.write(self.style.SUCCESS(f"{state}: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All seed users ensured."))
