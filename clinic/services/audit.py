from typing import Optional, Any, Dict

from clinic.models import AuditEvent


def log_action(*, user_id, action: str, obj=None, detail: Optional[Dict[str, Any]] = None) -> AuditEvent:
    """Record a mutation.  Runs inside the caller's transaction."""
    return AuditEvent.objects.create(
        user_id=user_id,
        action=action,
        object_type=obj._meta.model_name if obj is not None else None,
        object_id=str(obj.pk) if obj is not None and obj.pk is not None else None,
        detail=detail or {},
    )
