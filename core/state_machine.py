# core/state_machine.py
"""
Transition tables for marketplace entities.

Each entity (Project, Investment, Contract, a user's KYC review) declares
its legal moves as (from_status, action) -> to_status. The status lives in
`status` unless the table names another field. Any (status, action) pair
missing from the table is rejected with InvalidState; handlers never compare
status strings themselves.
"""
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from .exceptions import InvalidState
from .services import ActivityService

logger = logging.getLogger("predika.state")


class TransitionTable:
    def __init__(self, label: str, transitions: Dict[Tuple[str, str], str], field: str = "status"):
        self.label = label
        self.transitions = dict(transitions)
        self.field = field

    def current(self, instance) -> str:
        return getattr(instance, self.field)

    def target(self, current_status: str, action: str) -> Optional[str]:
        return self.transitions.get((current_status, action))

    def can_apply(self, instance, action: str) -> Tuple[bool, str]:
        """
        Check if `action` is legal for the instance's current status.

        Returns (can_apply: bool, reason: str)
        """
        current = self.current(instance)
        if self.target(current, action) is None:
            return False, (
                f"Cannot {action.replace('_', ' ')} a {self.label} "
                f"in '{current}' status"
            )
        return True, ""

    def allowed_actions(self, status: str) -> List[str]:
        return [action for (source, action) in self.transitions if source == status]

    def is_terminal(self, status: str) -> bool:
        return not self.allowed_actions(status)

    def states(self) -> Iterable[str]:
        seen = []
        for (source, _), target in self.transitions.items():
            for state in (source, target):
                if state not in seen:
                    seen.append(state)
        return seen

    def apply(self, instance, action: str, actor=None, save: bool = True,
              extra_fields: Iterable[str] = (), metadata: Optional[dict] = None) -> str:
        """
        Move the instance along `action` and return the new status.

        Args:
            instance: model instance carrying the table's status field
            action: the transition name from the table
            actor: the user performing the action (for logging / audit)
            save: whether to persist the status (plus extra_fields)
            extra_fields: other fields changed together with the status
            metadata: extra context stored on the audit row

        Raises InvalidState when the pair is not in the table.
        """
        can, reason = self.can_apply(instance, action)
        if not can:
            logger.warning(
                "Invalid %s transition attempted: id=%s, status=%s, action=%s, actor=%s",
                self.label, instance.pk, self.current(instance), action, getattr(actor, "id", None),
            )
            raise InvalidState(reason)

        old_status = self.current(instance)
        new_status = self.target(old_status, action)
        setattr(instance, self.field, new_status)

        if save:
            fields = [self.field, *extra_fields]
            if hasattr(instance, "updated_at"):
                fields.append("updated_at")
            instance.save(update_fields=fields)

        ActivityService.log_activity(
            actor=actor,
            verb=f"{self.label}.{action}",
            target=instance,
            metadata={"from": old_status, "to": new_status, **(metadata or {})},
        )

        logger.info(
            "%s transition: id=%s, from=%s, to=%s, action=%s, actor=%s",
            self.label, instance.pk, old_status, new_status, action, getattr(actor, "id", None),
        )
        return new_status

    def require(self, instance, action: str) -> None:
        """
        Guard for actions that keep the status as is (self-loops in the
        table). Raises InvalidState without touching the instance.
        """
        can, reason = self.can_apply(instance, action)
        if not can:
            logger.warning(
                "Invalid %s action attempted: id=%s, status=%s, action=%s",
                self.label, instance.pk, self.current(instance), action,
            )
            raise InvalidState(reason)
