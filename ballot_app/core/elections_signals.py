"""Push notification for committed election state changes.

Receivers get ``event_type`` and ``payload`` keyword arguments. The signal is
sent only after the surrounding transaction commits, so a receiver never sees
a change that was rolled back.
"""

import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

election_state_changed = Signal()


def notify_state_changed(*, event_type: str, payload: dict[str, object]) -> None:
    def _send() -> None:
        election_state_changed.send_robust(sender=None, event_type=event_type, payload=dict(payload))

    transaction.on_commit(_send)
