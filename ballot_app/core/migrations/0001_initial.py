from __future__ import annotations

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Election",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("not_created", "Not created"),
                            ("created", "Created"),
                            ("active", "Active"),
                            ("ended", "Ended"),
                            ("deleted", "Deleted"),
                        ],
                        default="not_created",
                        max_length=16,
                    ),
                ),
                ("created_datetime", models.DateTimeField(blank=True, null=True)),
                ("started_datetime", models.DateTimeField(blank=True, null=True)),
                ("ended_datetime", models.DateTimeField(blank=True, null=True)),
                ("deleted_datetime", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="Candidate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("index", models.PositiveIntegerField(unique=True)),
                ("name", models.CharField(max_length=255)),
                ("age", models.PositiveSmallIntegerField()),
                ("party", models.CharField(blank=True, default="", max_length=255)),
                ("identity", models.CharField(max_length=128, unique=True)),
                ("is_approved", models.BooleanField(default=False)),
                ("votes", models.PositiveIntegerField(default=0)),
                ("registered_at", models.DateTimeField(auto_now_add=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ("index",),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("is_approved", True), ("votes", 0), _connector="OR"),
                        name="candidate_votes_require_approval",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Voter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("identity", models.CharField(max_length=128, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("age", models.PositiveSmallIntegerField()),
                ("session_active", models.BooleanField(default=False)),
                ("has_voted", models.BooleanField(default=False)),
                ("voted_candidate_index", models.PositiveIntegerField(blank=True, null=True)),
                ("voted_at", models.DateTimeField(blank=True, null=True)),
                ("registered_at", models.DateTimeField(auto_now_add=True)),
                ("last_login_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ("registered_at", "id"),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("has_voted", True), ("voted_candidate_index__isnull", True), _connector="OR"),
                        name="voter_ballot_requires_has_voted",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLogEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("event_type", models.CharField(max_length=64)),
                ("actor", models.CharField(blank=True, default="", max_length=128)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("is_public", models.BooleanField(default=False)),
                (
                    "election",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="audit_log",
                        to="core.election",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Audit log entries",
                "ordering": ("timestamp", "id"),
                "indexes": [
                    models.Index(fields=["election", "timestamp"], name="audit_el_ts"),
                    models.Index(fields=["election", "is_public"], name="audit_el_pub"),
                ],
            },
        ),
    ]
