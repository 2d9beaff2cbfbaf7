# accounting/services/account_service.py

"""
CHART OF ACCOUNTS SERVICE

- create / update / delete / toggle accounts inside one business
- update / delete account categories (type frozen once used, delete refused
  while the category still has accounts)
- system accounts ("Opening Balance Equity", "Reconciliation Suspense")
  are created on first use with the next free numeric code
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from accounting.models.account import Account
from accounting.models.category import AccountCategory
from accounting.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

OPENING_BALANCE_EQUITY = "Opening Balance Equity"
RECONCILIATION_SUSPENSE = "Reconciliation Suspense"

# first code handed out when a business has no numeric codes yet
DEFAULT_CODE_BY_TYPE = {
    AccountCategory.ASSET: 1000,
    AccountCategory.LIABILITY: 2000,
    AccountCategory.EQUITY: 3000,
    AccountCategory.REVENUE: 4000,
    AccountCategory.EXPENSE: 5000,
}


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(exc.messages) if hasattr(exc, "messages") else str(exc)


def get_account(business_id, account_id) -> Account:
    try:
        account = (
            Account.objects.select_related("category")
            .filter(pk=account_id, business_id=business_id)
            .first()
        )
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Account {account_id!r} not found") from exc

    if account is None:
        raise NotFoundError(f"Account {account_id!r} not found")
    return account


def get_category(business_id, category_id) -> AccountCategory:
    try:
        category = AccountCategory.objects.filter(pk=category_id, business_id=business_id).first()
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Account category {category_id!r} not found") from exc

    if category is None:
        raise NotFoundError(f"Account category {category_id!r} not found")
    return category


def next_account_code(business_id, *, default: int = 1000) -> str:
    numeric = [
        int(code)
        for code in Account.objects.filter(business_id=business_id).values_list("code", flat=True)
        if code.isdigit()
    ]
    return str(max(numeric) + 1 if numeric else default)


@transaction.atomic
def create_account(
    *,
    business_id,
    category_id,
    code: str,
    name: str,
    description: str = "",
    is_active: bool = True,
    created_by=None,
) -> Account:
    category = get_category(business_id, category_id)

    try:
        account = Account.objects.create(
            business_id=business_id,
            category=category,
            code=code,
            name=name,
            description=description or "",
            is_active=is_active,
            created_by=created_by,
        )
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    logger.info(
        "Account created",
        extra={"business_id": business_id, "account_id": account.id, "code": account.code},
    )
    return account


@transaction.atomic
def get_or_create_system_account(
    *,
    business_id,
    name: str,
    category_type: str,
    description: str = "",
    created_by=None,
) -> Account:
    """
    Find the business's account called `name` under a `category_type`
    category, or create it. A same-named account of another type is left
    alone. A deactivated match is switched back on.
    """
    existing = (
        Account.objects.select_related("category")
        .filter(business_id=business_id, name=name, category__type=category_type)
        .order_by("id")
        .first()
    )
    if existing is not None:
        if not existing.is_active:
            existing.is_active = True
            existing.save(update_fields=["is_active", "updated_at"])
            logger.warning(
                "Reactivated system account",
                extra={"business_id": business_id, "account_id": existing.id, "account_name": name},
            )
        return existing

    category = AccountCategory.objects.filter(
        business_id=business_id, type=category_type
    ).first()
    if category is None:
        category = AccountCategory.objects.create(
            business_id=business_id,
            name=category_type,
            type=category_type,
        )

    account = Account.objects.create(
        business_id=business_id,
        category=category,
        code=next_account_code(
            business_id, default=DEFAULT_CODE_BY_TYPE.get(category_type, 1000)
        ),
        name=name,
        description=description,
        created_by=created_by,
    )
    logger.info(
        "System account created",
        extra={"business_id": business_id, "account_id": account.id, "account_name": name},
    )
    return account


@transaction.atomic
def toggle_account_status(*, business_id, account_id) -> Account:
    account = get_account(business_id, account_id)
    account.is_active = not account.is_active
    account.save(update_fields=["is_active", "updated_at"])

    logger.info(
        "Account status toggled",
        extra={"business_id": business_id, "account_id": account.id, "is_active": account.is_active},
    )
    return account


@transaction.atomic
def delete_account(*, business_id, account_id) -> None:
    account = get_account(business_id, account_id)

    if account.journal_items.exists():
        logger.warning(
            "Refused to delete account with journal items",
            extra={"business_id": business_id, "account_id": account.id},
        )
        raise InvalidStateError(
            "Account has journal items and cannot be deleted. Deactivate it instead."
        )

    if hasattr(account, "bank_account"):
        raise InvalidStateError("Account is linked to a bank account and cannot be deleted")

    account.delete()
    logger.info(
        "Account deleted",
        extra={"business_id": business_id, "account_id": account_id},
    )


@transaction.atomic
def update_account(
    *,
    business_id,
    account_id,
    category_id=None,
    code: str | None = None,
    name: str | None = None,
    description: str | None = None,
    is_active: bool | None = None,
) -> Account:
    account = get_account(business_id, account_id)

    if category_id is not None and category_id != account.category_id:
        category = get_category(business_id, category_id)
        if category.type != account.category.type and account.journal_items.exists():
            logger.warning(
                "Refused to move used account to another category type",
                extra={
                    "business_id": business_id,
                    "account_id": account.id,
                    "from_type": account.category.type,
                    "to_type": category.type,
                },
            )
            raise InvalidStateError(
                "Account has journal items and cannot move to a category of another type"
            )
        account.category = category

    if code is not None:
        account.code = code
    if name is not None:
        account.name = name
    if description is not None:
        account.description = description
    if is_active is not None:
        account.is_active = is_active

    try:
        account.save()
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc

    logger.info(
        "Account updated",
        extra={"business_id": business_id, "account_id": account.id, "code": account.code},
    )
    return account


@transaction.atomic
def update_category(
    *,
    business_id,
    category_id,
    name: str | None = None,
    type: str | None = None,
) -> AccountCategory:
    category = get_category(business_id, category_id)

    if name is not None:
        category.name = name
    if type is not None:
        category.type = type

    try:
        category.save()
    except ValidationError as exc:
        logger.warning(
            "Refused account category update",
            extra={"business_id": business_id, "category_id": category.id},
        )
        raise LedgerValidationError(_validation_message(exc)) from exc

    logger.info(
        "Account category updated",
        extra={"business_id": business_id, "category_id": category.id, "type": category.type},
    )
    return category


@transaction.atomic
def delete_category(*, business_id, category_id) -> None:
    category = get_category(business_id, category_id)

    if category.accounts.exists():
        logger.warning(
            "Refused to delete account category with accounts",
            extra={"business_id": business_id, "category_id": category.id},
        )
        raise InvalidStateError("Account category has accounts and cannot be deleted")

    category.delete()
    logger.info(
        "Account category deleted",
        extra={"business_id": business_id, "category_id": category_id},
    )
