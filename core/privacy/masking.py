"""
Masker: partial disclosure of a value by field type.

Stateless and unaware of callers or grants. Empty values pass through
unchanged so "no value" stays distinguishable from "hidden value".
"""
from .constants import FieldType
from .policy import VisibilityPolicy

MASK_CHAR = '*'
IDENTIFIER_PLACEHOLDER = '∗∗∗∗∗∗∗∗'
FINANCIAL_PLACEHOLDER = '—'
DATE_PLACEHOLDER = '∗∗∗∗-∗∗-∗∗'

MOBILE_KEEP_LEADING = 3
MOBILE_KEEP_TRAILING = 2


def mask_mobile(value: str) -> str:
    """01712345678 -> 017******78"""
    keep = MOBILE_KEEP_LEADING + MOBILE_KEEP_TRAILING
    if len(value) <= keep:
        return MASK_CHAR * len(value)
    hidden = len(value) - keep
    return value[:MOBILE_KEEP_LEADING] + MASK_CHAR * hidden + value[-MOBILE_KEEP_TRAILING:]


def mask_email(value: str) -> str:
    """rahim@mof.gov.bd -> r****@mof.gov.bd"""
    local, at, domain = value.partition('@')
    if not at or not local or not domain or '@' in domain:
        return MASK_CHAR * len(value)
    return local[0] + MASK_CHAR * (len(local) - 1) + '@' + domain


def mask_text(value: str) -> str:
    return value[0] + MASK_CHAR * (len(value) - 1)


class Masker:
    def __init__(self, policy=None):
        self.policy = policy or VisibilityPolicy()

    def mask(self, field, raw_value):
        if raw_value is None or raw_value == '':
            return raw_value

        field_type = self.policy.field_type(field)

        if field_type == FieldType.IDENTIFIER:
            return IDENTIFIER_PLACEHOLDER
        if field_type == FieldType.FINANCIAL:
            return FINANCIAL_PLACEHOLDER
        if field_type == FieldType.DATE:
            return DATE_PLACEHOLDER

        value = str(raw_value)
        if field_type == FieldType.MOBILE:
            return mask_mobile(value)
        if field_type == FieldType.EMAIL:
            return mask_email(value)
        return mask_text(value)
