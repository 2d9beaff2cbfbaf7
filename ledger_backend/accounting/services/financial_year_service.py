# accounting/services/financial_year_service.py

"""
FINANCIAL YEAR SERVICE

Guarantees:
- end_date > start_date
- Exactly one active year per business after activate()
- Activation is a single transaction (deactivate others, then activate)
- Overlapping years are permitted but logged
- Updates may not leave existing journal entries outside the year's dates
"""

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from accounting.models.financial_year import FinancialYear
from accounting.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(exc.messages) if hasattr(exc, "messages") else str(exc)


def _warn_on_overlap(business_id, start_date: date, end_date: date, *, exclude_pk=None) -> None:
    overlapping = FinancialYear.objects.filter(
        business_id=business_id,
        start_date__lte=end_date,
        end_date__gte=start_date,
    )
    if exclude_pk is not None:
        overlapping = overlapping.exclude(pk=exclude_pk)

    if overlapping.exists():
        logger.warning(
            "Financial year overlaps existing years",
            extra={
                "business_id": business_id,
                "start_date": str(start_date),
                "end_date": str(end_date),
                "overlapping_ids": list(overlapping.values_list("id", flat=True)),
            },
        )


def get_financial_year(business_id, financial_year_id) -> FinancialYear:
    try:
        year = FinancialYear.objects.filter(pk=financial_year_id, business_id=business_id).first()
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Financial year {financial_year_id!r} not found") from exc

    if year is None:
        raise NotFoundError(f"Financial year {financial_year_id} not found")
    return year


def get_active_financial_year(business_id) -> FinancialYear:
    year = FinancialYear.objects.filter(business_id=business_id, is_active=True).first()
    if year is None:
        raise NotFoundError("No active financial year for this business")
    return year


def is_date_within(year: FinancialYear, value: date) -> bool:
    return year.contains(value)


@transaction.atomic
def create_financial_year(
    *,
    business_id,
    start_date: date,
    end_date: date,
    name: str | None = None,
    is_active: bool = False,
) -> FinancialYear:
    if not start_date or not end_date:
        raise LedgerValidationError("start_date and end_date are required")
    if end_date <= start_date:
        raise LedgerValidationError("end_date must be after start_date")

    _warn_on_overlap(business_id, start_date, end_date)

    try:
        year = FinancialYear.objects.create(
            business_id=business_id,
            name=(name or "").strip(),
            start_date=start_date,
            end_date=end_date,
            is_active=False,
        )
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    logger.info(
        "Financial year created",
        extra={"business_id": business_id, "financial_year_id": year.id, "year_name": year.name},
    )

    if is_active:
        year = activate_financial_year(business_id=business_id, financial_year_id=year.id)

    return year


@transaction.atomic
def activate_financial_year(*, business_id, financial_year_id) -> FinancialYear:
    try:
        target_id = int(financial_year_id)
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Financial year {financial_year_id!r} not found") from exc

    years = list(
        FinancialYear.objects.select_for_update().filter(business_id=business_id)
    )
    target = next((y for y in years if y.id == target_id), None)
    if target is None:
        raise NotFoundError(f"Financial year {financial_year_id} not found")

    now = timezone.now()
    FinancialYear.objects.filter(business_id=business_id, is_active=True).exclude(
        pk=target.pk
    ).update(is_active=False, updated_at=now)
    FinancialYear.objects.filter(pk=target.pk).update(is_active=True, updated_at=now)

    target.refresh_from_db()
    logger.info(
        "Financial year activated",
        extra={"business_id": business_id, "financial_year_id": target.id},
    )
    return target


@transaction.atomic
def update_financial_year(
    *,
    business_id,
    financial_year_id,
    name: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    is_active: bool | None = None,
) -> FinancialYear:
    """
    is_active=True goes through activate_financial_year(). The active year
    cannot be switched off directly; activate another year instead.
    """
    year = get_financial_year(business_id, financial_year_id)

    if is_active is False and year.is_active:
        raise InvalidStateError(
            "The active financial year cannot be deactivated; activate another year instead"
        )

    start = start_date or year.start_date
    end = end_date or year.end_date
    if end <= start:
        raise LedgerValidationError("end_date must be after start_date")

    outside = year.journal_entries.exclude(entry_date__range=(start, end))
    if outside.exists():
        logger.warning(
            "Refused financial year update that strands journal entries",
            extra={
                "business_id": business_id,
                "financial_year_id": year.id,
                "start_date": str(start),
                "end_date": str(end),
            },
        )
        raise InvalidStateError(
            "Financial year has journal entries outside the new date range"
        )

    _warn_on_overlap(business_id, start, end, exclude_pk=year.pk)

    year.start_date = start
    year.end_date = end
    if name is not None:
        year.name = name

    try:
        year.save()
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    logger.info(
        "Financial year updated",
        extra={"business_id": business_id, "financial_year_id": year.id, "year_name": year.name},
    )

    if is_active and not year.is_active:
        year = activate_financial_year(business_id=business_id, financial_year_id=year.id)

    return year


@transaction.atomic
def delete_financial_year(*, business_id, financial_year_id) -> None:
    year = get_financial_year(business_id, financial_year_id)

    if year.is_active:
        logger.warning(
            "Refused to delete active financial year",
            extra={"business_id": business_id, "financial_year_id": year.id},
        )
        raise InvalidStateError("The active financial year cannot be deleted")

    if year.journal_entries.exists():
        logger.warning(
            "Refused to delete financial year with journal entries",
            extra={"business_id": business_id, "financial_year_id": year.id},
        )
        raise InvalidStateError("Financial year has journal entries and cannot be deleted")

    year.delete()
    logger.info(
        "Financial year deleted",
        extra={"business_id": business_id, "financial_year_id": financial_year_id},
    )
