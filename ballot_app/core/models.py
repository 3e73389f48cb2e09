from __future__ import annotations

from django.db import models
from django.db.models import Q


class Election(models.Model):
    """The one election this deployment runs.

    There is always exactly one row (pk=1). "Not created" and "deleted" are
    states of that row rather than its absence, so the row can double as the
    lock that serializes every write against the election state.
    """

    SINGLETON_PK = 1

    class Status(models.TextChoices):
        not_created = "not_created", "Not created"
        created = "created", "Created"
        active = "active", "Active"
        ended = "ended", "Ended"
        deleted = "deleted", "Deleted"

    name = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.not_created)

    created_datetime = models.DateTimeField(blank=True, null=True)
    started_datetime = models.DateTimeField(blank=True, null=True)
    ended_datetime = models.DateTimeField(blank=True, null=True)
    deleted_datetime = models.DateTimeField(blank=True, null=True)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name or f"<{self.status}>"

    @classmethod
    def load(cls) -> Election:
        # Migration 0002 creates the row; reads never insert it.
        return cls.objects.get(pk=cls.SINGLETON_PK)

    @classmethod
    def load_for_update(cls) -> Election:
        """Return the election row locked until the surrounding transaction ends."""
        return cls.objects.select_for_update().get(pk=cls.SINGLETON_PK)

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.active

    @property
    def has_ended(self) -> bool:
        return self.status == self.Status.ended


class Candidate(models.Model):
    # Addressing key for votes; assigned sequentially at registration.
    index = models.PositiveIntegerField(unique=True)
    name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField()
    party = models.CharField(max_length=255, blank=True, default="")
    identity = models.CharField(max_length=128, unique=True)
    is_approved = models.BooleanField(default=False)
    votes = models.PositiveIntegerField(default=0)

    registered_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ("index",)
        constraints = [
            models.CheckConstraint(
                condition=Q(is_approved=True) | Q(votes=0),
                name="candidate_votes_require_approval",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.index}:{self.name}"


class Voter(models.Model):
    identity = models.CharField(max_length=128, unique=True)
    name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField()
    session_active = models.BooleanField(default=False)

    # One-way latch: only a successful vote sets it, only election deletion clears it.
    has_voted = models.BooleanField(default=False)
    voted_candidate_index = models.PositiveIntegerField(blank=True, null=True)
    voted_at = models.DateTimeField(blank=True, null=True)

    registered_at = models.DateTimeField(auto_now_add=True)
    last_login_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ("registered_at", "id")
        constraints = [
            models.CheckConstraint(
                condition=Q(has_voted=True) | Q(voted_candidate_index__isnull=True),
                name="voter_ballot_requires_has_voted",
            ),
        ]

    def __str__(self) -> str:
        return self.identity

    @property
    def is_registered(self) -> bool:
        return self.pk is not None


class AuditLogEntry(models.Model):
    election = models.ForeignKey(Election, on_delete=models.CASCADE, related_name="audit_log")
    timestamp = models.DateTimeField(auto_now_add=True)
    event_type = models.CharField(max_length=64)
    actor = models.CharField(max_length=128, blank=True, default="")
    payload = models.JSONField(blank=True, default=dict)
    is_public = models.BooleanField(default=False)

    class Meta:
        verbose_name_plural = "Audit log entries"
        ordering = ("timestamp", "id")
        indexes = [
            models.Index(fields=["election", "timestamp"], name="audit_el_ts"),
            models.Index(fields=["election", "is_public"], name="audit_el_pub"),
        ]

    def __str__(self) -> str:
        return f"{self.election_id}:{self.event_type}"
