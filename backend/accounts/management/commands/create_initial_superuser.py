from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model
import os


class Command(BaseCommand):
    help = "Create an initial superuser from DJANGO_SUPERUSER_* env vars if not exists"

    def handle(self, *args, **kwargs):
        User = get_user_model()
        email = os.environ.get("DJANGO_SUPERUSER_EMAIL")
        password = os.environ.get("DJANGO_SUPERUSER_PASSWORD")
        full_name = os.environ.get("DJANGO_SUPERUSER_FULL_NAME", "")
        phone = os.environ.get("DJANGO_SUPERUSER_PHONE", "")

        if not email:
            raise CommandError("DJANGO_SUPERUSER_EMAIL is required")

        existing = User.objects.filter(email__iexact=email).first()
        if existing:
            changed = False
            if not existing.is_superuser:
                existing.is_superuser = True
                changed = True
            if not existing.is_staff:
                existing.is_staff = True
                changed = True
            if full_name and existing.get_full_name() != full_name:
                existing.set_full_name(full_name)
                changed = True
            if phone and existing.phone != phone:
                existing.phone = phone
                changed = True
            if changed:
                existing.save()
                self.stdout.write(self.style.SUCCESS("Existing user updated with superuser/staff flags"))
            else:
                self.stdout.write(self.style.WARNING("Superuser already exists"))
            return

        if not password:
            raise CommandError("DJANGO_SUPERUSER_PASSWORD is required to create a superuser")

        user = User(email=User.objects.normalize_email(email), phone=phone)
        user.set_full_name(full_name or email.split("@")[0])
        user.role = User.Role.OWNER
        user.is_staff = True
        user.is_superuser = True
        user.set_password(password)
        user.save()
        self.stdout.write(self.style.SUCCESS("Superuser created"))
