from __future__ import annotations

import logging

from core.elections_signals import notify_state_changed
from core.models import AuditLogEntry, Candidate, Election

logger = logging.getLogger(__name__)


def record_event(
    *,
    election: Election,
    event_type: str,
    actor: str | None = None,
    payload: dict[str, object] | None = None,
    is_public: bool = True,
) -> AuditLogEntry:
    """Write one audit entry, log it, and queue the change notification.

    Must be called inside the transaction that performed the change.
    """
    data = dict(payload or {})
    entry = AuditLogEntry.objects.create(
        election=election,
        event_type=event_type,
        actor=str(actor or ""),
        payload=data,
        is_public=is_public,
    )
    logger.info(
        "Election event committed event=%s actor=%s",
        event_type,
        actor or "-",
        extra={"event": f"election.{event_type}", "component": "election", **{f"audit_{k}": v for k, v in data.items()}},
    )
    notify_state_changed(event_type=event_type, payload=data)
    return entry


def build_audit_export(*, include_private: bool = False) -> dict[str, object]:
    election = Election.load()
    entries = AuditLogEntry.objects.filter(election=election)
    if not include_private:
        entries = entries.filter(is_public=True)

    audit_log: list[dict[str, object]] = []
    for entry in entries.only("timestamp", "event_type", "actor", "payload").order_by("timestamp", "id"):
        payload = entry.payload if isinstance(entry.payload, dict) else {"data": entry.payload}
        audit_log.append(
            {
                "timestamp": entry.timestamp.isoformat(),
                "event_type": str(entry.event_type),
                "actor": str(entry.actor),
                "payload": payload,
            }
        )

    candidates = [
        {
            "index": c.index,
            "name": c.name,
            "party": c.party,
            "is_approved": c.is_approved,
            "votes": c.votes,
        }
        for c in Candidate.objects.order_by("index")
    ]

    return {
        "election": {
            "name": election.name,
            "status": str(election.status),
            "created_datetime": election.created_datetime.isoformat() if election.created_datetime else None,
            "started_datetime": election.started_datetime.isoformat() if election.started_datetime else None,
            "ended_datetime": election.ended_datetime.isoformat() if election.ended_datetime else None,
        },
        "candidates": candidates,
        "audit_log": audit_log,
    }
