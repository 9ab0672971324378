"""
Permission evaluator: one closed decision table from (role, level, grant)
to SHOW, MASK or REDACT.

    level       admin/hr   manager/user          viewer
    public      SHOW       SHOW                  SHOW
    internal    SHOW       SHOW                  MASK
    restricted  SHOW       SHOW if granted,      REDACT
                           else MASK

Unknown roles are evaluated as viewer.
"""
from core.user_accounts.models import Role

from .constants import AccessOutcome, VisibilityLevel
from .dtos import AccessDecision, NO_GRANTS

PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.HR})
STAFF_ROLES = frozenset({Role.MANAGER, Role.USER})

# Highest level each role sees in full without a grant
ROLE_CLEARANCE = {
    Role.ADMIN: VisibilityLevel.RESTRICTED,
    Role.HR: VisibilityLevel.RESTRICTED,
    Role.MANAGER: VisibilityLevel.INTERNAL,
    Role.USER: VisibilityLevel.INTERNAL,
    Role.VIEWER: VisibilityLevel.PUBLIC,
}


def normalize_role(role) -> Role:
    """Map a raw role value to Role; anything unknown becomes VIEWER."""
    if role in Role.values:
        return Role(role)
    return Role.VIEWER


class PermissionEvaluator:
    """Pure decision table. Holds no state and performs no I/O."""

    def decide(self, role, subject_id, field, level, grants=NO_GRANTS) -> AccessOutcome:
        role = normalize_role(role)

        if level == VisibilityLevel.PUBLIC:
            return AccessOutcome.SHOW

        if level == VisibilityLevel.INTERNAL:
            if role == Role.VIEWER:
                return AccessOutcome.MASK
            return AccessOutcome.SHOW

        # restricted, or anything that is not a recognised level
        if role in PRIVILEGED_ROLES:
            return AccessOutcome.SHOW
        if role == Role.VIEWER:
            return AccessOutcome.REDACT
        if grants.covers(subject_id, field):
            return AccessOutcome.SHOW
        return AccessOutcome.MASK

    def evaluate(self, role, subject_id, field, level, grants=NO_GRANTS) -> AccessDecision:
        """Same as decide(), wrapped with the levels involved."""
        return AccessDecision(
            field=field,
            level_required=VisibilityLevel(level) if level in VisibilityLevel.values else VisibilityLevel.RESTRICTED,
            level_granted=ROLE_CLEARANCE[normalize_role(role)],
            outcome=self.decide(role, subject_id, field, level, grants),
        )
