import json
import logging
from typing import override

from django.core.management.base import BaseCommand
from django.core.serializers.json import DjangoJSONEncoder

from core.elections_services import ElectionSystem

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Print the election status, candidate tally and audit log as JSON."

    @override
    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--include-private",
            action="store_true",
            help="Include private entries (sessions and individual votes).",
        )
        parser.add_argument(
            "--indent",
            type=int,
            default=2,
            help="JSON indentation (0 for compact output).",
        )

    @override
    def handle(self, *args, **options) -> None:
        include_private: bool = bool(options.get("include_private"))
        indent: int = int(options.get("indent") or 0)

        export = ElectionSystem().build_audit_export(include_private=include_private)
        logger.info(
            "election_audit_export: exported entries=%d include_private=%s",
            len(export["audit_log"]),
            include_private,
        )
        self.stdout.write(
            json.dumps(export, cls=DjangoJSONEncoder, sort_keys=True, indent=indent or None)
        )
