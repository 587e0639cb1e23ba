from .models import DomainActivity


class ActivityService:
    @staticmethod
    def log_activity(actor, verb, target, metadata=None):
        """
        Logs a domain activity against any model instance.
        Anonymous actors are stored as NULL.
        """
        if metadata is None:
            metadata = {}

        if actor is not None and not getattr(actor, "is_authenticated", False):
            actor = None

        return DomainActivity.objects.create(
            actor=actor,
            verb=verb,
            target_type=target._meta.label_lower,
            target_id=str(target.pk),
            metadata=metadata,
        )

    @staticmethod
    def history_for(target):
        return DomainActivity.objects.filter(
            target_type=target._meta.label_lower,
            target_id=str(target.pk),
        )
