import logging
import os
from typing import override

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from core.elections_errors import InvalidInputError
from core.elections_validation import normalize_identity

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create a principal that can sign in to the election API, or reset its password."

    @override
    def add_arguments(self, parser) -> None:
        parser.add_argument("identity", help="Principal address, e.g. 0x followed by 40 hex digits.")
        parser.add_argument(
            "--password-env",
            default="ELECTION_PRINCIPAL_PASSWORD",
            help="Environment variable holding the password (default: ELECTION_PRINCIPAL_PASSWORD).",
        )

    @override
    def handle(self, *args, **options) -> None:
        try:
            principal = normalize_identity(options["identity"])
        except InvalidInputError as exc:
            raise CommandError(str(exc)) from exc

        env_name = str(options["password_env"])
        password = os.environ.get(env_name, "")
        if not password:
            raise CommandError(f"{env_name} is not set")

        user, created = get_user_model().objects.get_or_create(username=principal)
        user.set_password(password)
        user.save(update_fields=["password"])

        logger.info("election_principal: principal=%s created=%s", principal, created)
        self.stdout.write(f"{'Created' if created else 'Updated'} principal {principal}")
