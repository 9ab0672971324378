from django.conf import settings

DEFAULTS = {
    'DEFAULT_UNMASK_TTL_MINUTES': 60,
    'MAX_UNMASK_TTL_MINUTES': 24 * 60,
    'UNMASK_MAX_REQUESTS_PER_DAY': 5,
    'AUDIT_TRAIL_DEFAULT_LIMIT': 50,
    'AUDIT_TRAIL_MAX_LIMIT': 500,
    'REQUEST_ID_HEADER': 'HTTP_X_REQUEST_ID',
    'TRUSTED_PROXY_COUNT': 0,
}


def privacy_setting(name):
    """
    Read one privacy knob from settings.PRIVACY, falling back to DEFAULTS.

    Read on every call so override_settings works in tests.
    """
    overrides = getattr(settings, 'PRIVACY', None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
