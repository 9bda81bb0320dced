"""
Row ownership for every tenant query.

An :class:`OwnerScope` is built once per request from the authenticated
practitioner.  Views and services obtain tenant querysets only through
it, so a row owned by someone else looks exactly like a missing row.
"""
from __future__ import annotations

from rest_framework.exceptions import NotFound


class OwnerScope:
    def __init__(self, user_id):
        self.user_id = user_id

    @classmethod
    def for_request(cls, request) -> "OwnerScope":
        scope = getattr(request, '_owner_scope', None)
        if scope is None:
            scope = cls(request.user.user_id)
            request._owner_scope = scope
        return scope

    def __call__(self, model):
        return model.objects.owned_by(self.user_id)

    def get(self, model, pk, *, for_update=False, select_related=()):
        """Fetch one owned row or raise a 404 naming the model."""
        qs = self(model)
        if select_related:
            qs = qs.select_related(*select_related)
        if for_update:
            qs = qs.select_for_update()
        obj = qs.filter(pk=pk).first()
        if obj is None:
            raise NotFound(f"{model._meta.verbose_name.capitalize()} not found")
        return obj

    def create(self, model, **fields):
        return model.objects.create(user_id=self.user_id, **fields)
