import logging

from django.db import transaction

from core.privacy.constants import AccessType, VisibilityLevel
from core.privacy.dtos import CallerContext, RequestMeta
from core.privacy.evaluator import normalize_role
from core.privacy.policy import FIELD_CATALOG
from core.privacy.services import get_field_security_service
from core.user_accounts.models import Role
from HR.officers.dtos import OfficerVisibilityUpdateDTO
from HR.officers.models import Officer

logger = logging.getLogger(__name__)

# Fields shown in directory list rows: everything whose baseline is not restricted
SUMMARY_FIELDS = tuple(
    name for name, spec in FIELD_CATALOG.items()
    if spec.baseline != VisibilityLevel.RESTRICTED
)


class OfficerService:
    """Service for Officer Directory reads and visibility management"""

    @staticmethod
    def directory_queryset(query_params):
        return Officer.objects.active().filter_by_query_params(query_params)

    @staticmethod
    def list_directory(caller: CallerContext, officers, service=None):
        """
        Render officers as directory list rows.

        Restricted fields are left out of list rows for every role, so
        listing writes nothing to the access log.
        """
        service = service or get_field_security_service()
        return [
            dict(service.render_summary(officer, caller, SUMMARY_FIELDS))
            for officer in officers
        ]

    @staticmethod
    def get_detail(caller: CallerContext, officer: Officer, meta: RequestMeta = None, service=None):
        """
        Full record for one officer as `caller` may see it.

        Returns:
            dict with the rendered officer, the masked field names and
            whether the caller could ask for them to be unmasked.
        """
        service = service or get_field_security_service()
        record = service.evaluate_and_render(officer, caller, meta, access_type=AccessType.VIEW)

        masked_fields = record.masked_fields
        can_request = (
            bool(masked_fields)
            and normalize_role(caller.role) not in (Role.VIEWER, Role.ADMIN, Role.HR)
        )
        return {
            'officer': dict(record),
            'masked_fields': masked_fields,
            'can_request_unmask': can_request,
        }

    @staticmethod
    @transaction.atomic
    def update_visibility(user, dto: OfficerVisibilityUpdateDTO) -> Officer:
        """
        Change visibility override columns on one officer.

        Raises:
            Officer.DoesNotExist: no active officer with that id
            django.core.exceptions.ValidationError: a value is not a known level
        """
        officer = Officer.objects.active().select_for_update().get(pk=dto.officer_id)

        updates = dict(dto.overrides)
        updates['updated_by'] = user
        officer.update_fields(updates)

        logger.info(
            f"Visibility overrides on officer {officer.pk} changed by {user.pk}: "
            f"{dto.overrides}"
        )
        return officer
