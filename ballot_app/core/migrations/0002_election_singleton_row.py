from __future__ import annotations

from django.db import migrations

SINGLETON_PK = 1


def create_election_row(apps, schema_editor) -> None:
    Election = apps.get_model("core", "Election")
    Election.objects.get_or_create(pk=SINGLETON_PK, defaults={"status": "not_created"})


def delete_election_row(apps, schema_editor) -> None:
    Election = apps.get_model("core", "Election")
    Election.objects.filter(pk=SINGLETON_PK).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_election_row, delete_election_row),
    ]
