import logging

from ..exceptions import InvalidTransition

logger = logging.getLogger(__name__)


def apply_status(obj, new_status: str) -> str:
    """Move ``obj`` to ``new_status`` if its transition table allows it.

    Returns the previous status.  The caller saves the row, normally
    after locking it with ``select_for_update``.
    """
    old = obj.status
    if not obj.can_transition_to(new_status):
        label = obj._meta.verbose_name
        logger.info('rejected %s %s transition %s -> %s', label, obj.pk, old, new_status)
        raise InvalidTransition(f'Cannot change {label} status from {old} to {new_status}')
    obj.status = new_status
    if old != new_status:
        logger.info('%s %s status %s -> %s', obj._meta.verbose_name, obj.pk, old, new_status)
    return old
