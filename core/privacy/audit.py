"""
Audit logging of sensitive field reads.

AuditLogger writes one entry per read through a pluggable store:
DatabaseAuditStore in production, InMemoryAuditStore in tests. A store
failure surfaces as AuditWriteFailed so the read that triggered it aborts.
"""
import dataclasses
import itertools
import logging

from django.contrib.contenttypes.models import ContentType
from django.db import DatabaseError
from django.utils import timezone

from .constants import AccessType, VisibilityLevel
from .dtos import AuditEntry, RequestMeta
from .exceptions import AuditWriteFailed
from .models import FieldAccessLog

logger = logging.getLogger(__name__)


class DatabaseAuditStore:
    """Writes entries to the field_access_logs table."""

    def write(self, entry: AuditEntry) -> int:
        app_label, model = entry.subject_type.split('.')
        row = FieldAccessLog.objects.create(
            accessor_id=entry.accessor_id,
            accessor_role=entry.accessor_role,
            subject_type=ContentType.objects.get_by_natural_key(app_label, model),
            subject_id=entry.subject_id,
            field_name=entry.field_name,
            outcome=entry.outcome,
            level=entry.level,
            access_type=entry.access_type,
            timestamp=entry.timestamp,
            request_id=entry.request_id,
            ip=entry.ip,
            user_agent=entry.user_agent,
        )
        return row.pk

    def recent_for_subject(self, subject, limit):
        return list(
            FieldAccessLog.objects.for_subject(subject)
            .select_related('accessor')
            .newest_first()[:limit]
        )


class InMemoryAuditStore:
    """Keeps entries in a list. For tests and dry runs."""

    def __init__(self):
        self.entries = []
        self._ids = itertools.count(1)

    def write(self, entry: AuditEntry) -> int:
        stored = dataclasses.replace(entry, id=next(self._ids))
        self.entries.append(stored)
        return stored.id

    def recent_for_subject(self, subject, limit):
        label = subject._meta.label_lower
        matching = [
            entry for entry in self.entries
            if entry.subject_type == label and entry.subject_id == subject.pk
        ]
        matching.sort(key=lambda entry: (entry.timestamp, entry.id), reverse=True)
        return matching[:limit]


class AuditLogger:
    def __init__(self, store=None, clock=timezone.now):
        self.store = store if store is not None else DatabaseAuditStore()
        self.clock = clock

    def record(self, accessor_id, subject, field, outcome, request_meta=None, *,
               accessor_role='', level=VisibilityLevel.RESTRICTED, access_type=AccessType.VIEW) -> int:
        """
        Persist one access and return the new entry id.

        Raises:
            AuditWriteFailed: the store rejected the write
        """
        meta = request_meta or RequestMeta()
        entry = AuditEntry(
            accessor_id=accessor_id,
            accessor_role=str(accessor_role),
            subject_type=subject._meta.label_lower,
            subject_id=subject.pk,
            field_name=field,
            outcome=str(outcome),
            level=str(level),
            access_type=str(access_type),
            timestamp=self.clock(),
            request_id=meta.request_id,
            ip=meta.ip,
            user_agent=meta.user_agent,
        )
        try:
            return self.store.write(entry)
        except DatabaseError as exc:
            logger.exception(
                f"Audit write failed for accessor {accessor_id} on "
                f"{entry.subject_type}:{entry.subject_id}.{field} (request {meta.request_id})"
            )
            raise AuditWriteFailed(
                f"Could not record access to {field}; the read was aborted"
            ) from exc

    def recent_for_subject(self, subject, limit):
        return self.store.recent_for_subject(subject, limit)
