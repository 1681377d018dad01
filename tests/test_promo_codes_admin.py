# tests/test_promo_codes_admin.py
import uuid

import pytest
from pydantic import ValidationError

from bookstore.core.errors import ConflictError, NotFoundError
from bookstore.models.common import RecordStatus
from bookstore.repositories.promo_code_repo import PromoCodeRepository
from bookstore.repositories.user_repo import UserRepository
from bookstore.schemas.promo_code import (
    PercentMaxValueTypeDetail,
    PromoCodeCreate,
    PromoCodeUpdate,
    ValueTypeDetail,
)
from bookstore.schemas.user import Actor
from bookstore.services.promo_code_service import PromoCodeService

from conftest import make_user

SUPER_ADMIN = Actor(role="SuperAdmin", email="root@bookstore.test")


@pytest.fixture
def service() -> PromoCodeService:
    return PromoCodeService(PromoCodeRepository(), UserRepository())


def test_create_flattens_type_detail_and_eligibility(session, service):
    category = uuid.uuid4()
    payload = PromoCodeCreate.model_validate(
        {
            "name": "  SAVE20 ",
            "usage_limit": 100,
            "eligibility": {"category_ids": [str(category)], "min_value": 300},
            "type_detail": {
                "type": "percentage_with_max_value",
                "percent": 20,
                "max_value": 30,
            },
        }
    )

    created = service.create(session, SUPER_ADMIN, payload)

    assert created.name == "SAVE20"
    assert created.type_detail == PercentMaxValueTypeDetail(percent=20, max_value=30)
    assert created.eligibility.category_ids == [category]
    assert created.eligibility.min_value == 300
    assert created.issuer_type == "SuperAdmin"
    assert created.issuer_email == "root@bookstore.test"
    assert created.status == RecordStatus.ACTIVE

    row = service.promo_code_repo.get_by_id(session, created.id)
    assert row.discount_type == "percentage_with_max_value"
    assert row.eligible_category_ids == [str(category)]


def test_unknown_type_detail_is_rejected():
    with pytest.raises(ValidationError):
        PromoCodeCreate.model_validate(
            {"name": "X", "type_detail": {"type": "bogus", "value": 1}}
        )


def test_duplicate_name_conflicts(session, service):
    payload = PromoCodeCreate(name="ONCE", type_detail=ValueTypeDetail(value=10))
    service.create(session, SUPER_ADMIN, payload)

    with pytest.raises(ConflictError):
        service.create(session, SUPER_ADMIN, payload)


def test_admin_issuer_must_exist(session, service):
    payload = PromoCodeCreate(name="ADMIN", type_detail=ValueTypeDetail(value=10))

    with pytest.raises(NotFoundError):
        service.create(session, Actor(role="Admin", id=uuid.uuid4()), payload)

    admin = make_user(session, role="admin")
    created = service.create(session, Actor(role="Admin", id=admin.id), payload)
    assert created.issuer_id == admin.id


def test_update_switches_discount_type(session, service):
    created = service.create(
        session,
        SUPER_ADMIN,
        PromoCodeCreate(
            name="FLEX",
            type_detail=PercentMaxValueTypeDetail(percent=10, max_value=20),
        ),
    )

    updated = service.update(
        session,
        created.id,
        PromoCodeUpdate(description="now flat", type_detail=ValueTypeDetail(value=40)),
    )

    assert updated.description == "now flat"
    assert updated.type_detail == ValueTypeDetail(value=40)
    row = service.promo_code_repo.get_by_id(session, created.id)
    assert row.percent is None
    assert row.max_value is None


def test_update_with_null_eligibility_clears_scope(session, service):
    category = uuid.uuid4()
    created = service.create(
        session,
        SUPER_ADMIN,
        PromoCodeCreate.model_validate(
            {
                "name": "SCOPED",
                "eligibility": {"category_ids": [str(category)], "min_value": 300},
                "type_detail": {"type": "percent", "percent": 10},
            }
        ),
    )

    untouched = service.update(
        session, created.id, PromoCodeUpdate.model_validate({"description": "same scope"})
    )
    assert untouched.eligibility.category_ids == [category]

    cleared = service.update(
        session, created.id, PromoCodeUpdate.model_validate({"eligibility": None})
    )

    assert cleared.eligibility.category_ids == []
    assert cleared.eligibility.min_value is None
    row = service.promo_code_repo.get_by_id(session, created.id)
    assert row.eligible_category_ids == []
    assert row.min_value is None


def test_update_to_taken_name_conflicts(session, service):
    service.create(session, SUPER_ADMIN, PromoCodeCreate(name="A", type_detail=ValueTypeDetail(value=1)))
    b = service.create(session, SUPER_ADMIN, PromoCodeCreate(name="B", type_detail=ValueTypeDetail(value=1)))

    with pytest.raises(ConflictError):
        service.update(session, b.id, PromoCodeUpdate(name="A"))


def test_soft_delete_records_super_admin_email(session, service):
    created = service.create(
        session, SUPER_ADMIN, PromoCodeCreate(name="BYE", type_detail=ValueTypeDetail(value=5))
    )

    deleted = service.soft_delete(session, SUPER_ADMIN, created.id)

    assert deleted.status == RecordStatus.DELETED
    row = service.promo_code_repo.get_by_id(session, created.id)
    assert row.deleted_by_role == "SuperAdmin"
    assert row.deleted_by_email == "root@bookstore.test"
    assert service.promo_code_repo.get_active(session, created.id) is None


def test_get_unknown_promo_code(session, service):
    with pytest.raises(NotFoundError):
        service.get(session, uuid.uuid4())
