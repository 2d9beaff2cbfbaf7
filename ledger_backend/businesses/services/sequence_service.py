# businesses/services/sequence_service.py

"""
REFERENCE NUMBER SEQUENCES

Format: {prefix}{number}, number zero-padded to SEQUENCE_WIDTH digits.
Example: JE-00001, INV-00042

Guarantees:
- Monotonic per (business, document_type)
- Row-locked increment (select_for_update) inside the caller's transaction
- Skips numbers already taken by manually-entered references
"""

from __future__ import annotations

import logging
from typing import Callable

from django.db import transaction

from businesses.models.sequence import DocumentSequence
from businesses.services.settings_service import get_company_setting

logger = logging.getLogger(__name__)

SEQUENCE_WIDTH = 5
MAX_SKIPS = 1000


def format_reference(prefix: str, number: int) -> str:
    return f"{prefix or ''}{number:0{SEQUENCE_WIDTH}d}"


@transaction.atomic
def next_reference(
    *,
    business_id,
    document_type: str,
    is_taken: Callable[[str], bool] | None = None,
) -> str:
    setting = get_company_setting(business_id)
    prefix = setting.prefix_for(document_type)

    DocumentSequence.objects.get_or_create(
        business_id=setting.business_id,
        document_type=document_type,
    )
    seq = DocumentSequence.objects.select_for_update().get(
        business_id=setting.business_id,
        document_type=document_type,
    )

    for _ in range(MAX_SKIPS):
        seq.last_number += 1
        candidate = format_reference(prefix, seq.last_number)
        if is_taken is None or not is_taken(candidate):
            seq.save(update_fields=["last_number", "updated_at"])
            return candidate
        logger.info(
            "Reference number already in use, skipping",
            extra={"business_id": setting.business_id, "reference": candidate},
        )

    raise RuntimeError(
        f"Could not allocate a free {document_type} reference for business {setting.business_id}"
    )
