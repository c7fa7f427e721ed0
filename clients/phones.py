"""Phone number normalization for the client registry."""

import re

import phonenumbers
from django.conf import settings


def normalize_phone(raw, region=None):
    """Return ``raw`` in E.164 form, or its bare digits when it cannot be parsed.

    ``00`` prefixes are treated as ``+``. Numbers without a country code are
    read against ``region`` (``PHONE_DEFAULT_REGION`` by default).
    """
    if not raw:
        return ''
    value = str(raw).strip()
    clean = re.sub(r'(?<!^)\+|[^\d+]', '', value)
    if clean.startswith('00'):
        clean = '+' + clean[2:]

    region = region or getattr(settings, 'PHONE_DEFAULT_REGION', 'EG')
    try:
        parsed = phonenumbers.parse(clean, None if clean.startswith('+') else region)
    except phonenumbers.NumberParseException:
        return re.sub(r'\D', '', value)
    if not phonenumbers.is_valid_number(parsed):
        return re.sub(r'\D', '', value)
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
