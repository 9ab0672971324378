"""
Data Transfer Objects for the privacy core.

All of these are immutable. A caller context and request metadata are
built once per request and passed down; decisions and audit entries are
produced per field.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional, Tuple

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_ipv46_address

from .conf import privacy_setting
from .constants import AccessOutcome, VisibilityLevel


@dataclass(frozen=True)
class CallerContext:
    """Identity of the account performing an operation."""
    id: int
    role: str

    @classmethod
    def from_user(cls, user):
        return cls(id=user.pk, role=getattr(user, 'role', '') or '')


def client_ip(meta):
    """
    Resolve the client address from request.META.

    X-Forwarded-For is only read when TRUSTED_PROXY_COUNT is set; the
    address is then the one the outermost trusted proxy appended. Values
    that are not valid IPv4/IPv6 addresses resolve to None.
    """
    ip = meta.get('REMOTE_ADDR')
    proxy_count = privacy_setting('TRUSTED_PROXY_COUNT')
    if proxy_count:
        hops = [hop.strip() for hop in meta.get('HTTP_X_FORWARDED_FOR', '').split(',') if hop.strip()]
        if len(hops) >= proxy_count:
            ip = hops[-proxy_count]

    if not ip:
        return None
    try:
        validate_ipv46_address(ip)
    except DjangoValidationError:
        return None
    return ip


@dataclass(frozen=True)
class RequestMeta:
    """Request correlation data copied onto every access log entry."""
    request_id: str = ''
    ip: Optional[str] = None
    user_agent: str = ''

    @classmethod
    def from_request(cls, request):
        """
        Build from a Django/DRF request.

        Uses the configured request id header when the client sent one,
        otherwise generates a fresh id. The client address is REMOTE_ADDR
        unless TRUSTED_PROXY_COUNT proxies sit in front of the app.
        """
        meta = request.META
        request_id = meta.get(privacy_setting('REQUEST_ID_HEADER')) or uuid.uuid4().hex

        return cls(
            request_id=request_id[:64],
            ip=client_ip(meta),
            user_agent=meta.get('HTTP_USER_AGENT', '')[:512],
        )

    @classmethod
    def for_job(cls, job_name):
        """Metadata for reads made by a batch job rather than an HTTP request."""
        return cls(request_id=f'{job_name}-{uuid.uuid4().hex[:12]}', user_agent=job_name)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of evaluating one field for one caller. Never persisted."""
    field: str
    level_required: VisibilityLevel
    level_granted: VisibilityLevel
    outcome: AccessOutcome


@dataclass(frozen=True)
class GrantSet:
    """(subject_id, field) pairs currently unlocked for a caller by approved unmask requests."""
    pairs: FrozenSet[Tuple[int, str]] = frozenset()

    def covers(self, subject_id, field_name):
        return (subject_id, field_name) in self.pairs

    @classmethod
    def for_subject(cls, subject_id, field_names):
        return cls(frozenset((subject_id, name) for name in field_names))

    def __bool__(self):
        return bool(self.pairs)


NO_GRANTS = GrantSet()


@dataclass(frozen=True)
class AuditEntry:
    """One field access, as handed to an audit store."""
    accessor_id: int
    accessor_role: str
    subject_type: str
    subject_id: int
    field_name: str
    outcome: str
    level: str
    access_type: str
    timestamp: datetime
    request_id: str = ''
    ip: Optional[str] = None
    user_agent: str = ''
    id: Optional[int] = None
