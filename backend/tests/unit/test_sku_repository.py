"""Unit tests for SkuRepository against SQLite"""

from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from sku_service.domain.sku import DuplicateKeyError, PageRequest, SortOrder
from sku_service.domain.sku.predicates import build_filter_predicate
from sku_service.infrastructure.repositories import SkuRepository
from sku_service.models.sku import Sku


def make_sku(sku_code: str, upc=None, category="LBR", name="Board", price=None) -> Sku:
    return Sku(sku_code=sku_code, upc=upc, name=name, category=category, status="ACTIVE", price=price)


class TestMaxSequence:

    def test_empty_table_returns_zero(self, repository):
        assert repository.find_max_sequence_by_prefix("THD-LBR") == 0

    def test_highest_sequence_for_prefix_only(self, repository):
        repository.save_all([
            make_sku("THD-LBR-0000007"),
            make_sku("THD-LBR-0000012"),
            make_sku("THD-PLB-0000099", category="PLB"),
        ])

        assert repository.find_max_sequence_by_prefix("THD-LBR") == 12
        assert repository.find_max_sequence_by_prefix("THD-PLB") == 99
        assert repository.find_max_sequence_by_prefix("THD-ELC") == 0


class TestSave:

    def test_save_assigns_id_version_and_timestamps(self, repository):
        sku = repository.save(make_sku("THD-LBR-0000001", upc="012345678901"))

        assert sku.id is not None
        assert sku.version == 1
        assert sku.created_at is not None
        assert sku.status == "ACTIVE"

    def test_exists_checks(self, repository):
        repository.save(make_sku("THD-LBR-0000001", upc="012345678901"))

        assert repository.exists_by_upc("012345678901") is True
        assert repository.exists_by_upc("999999999999") is False
        assert repository.exists_by_sku_code("THD-LBR-0000001") is True
        assert repository.exists_by_sku_code("THD-LBR-0000002") is False

    def test_unique_upc_violation_is_translated(self, repository):
        """Writers that skipped the pre-check still get DuplicateKeyError"""
        repository.save(make_sku("THD-LBR-0000001", upc="012345678901"))

        with pytest.raises(DuplicateKeyError) as exc_info:
            repository.save(make_sku("THD-LBR-0000002", upc="012345678901"))

        assert exc_info.value.field == "upc"
        assert exc_info.value.value == "012345678901"

    def test_unique_sku_code_violation_is_translated(self, repository):
        repository.save(make_sku("THD-LBR-0000001"))

        with pytest.raises(DuplicateKeyError) as exc_info:
            repository.save(make_sku("THD-LBR-0000001"))

        assert exc_info.value.field == "sku_code"

    def test_session_usable_after_violation(self, repository):
        repository.save(make_sku("THD-LBR-0000001", upc="012345678901"))
        with pytest.raises(DuplicateKeyError):
            repository.save(make_sku("THD-LBR-0000002", upc="012345678901"))

        repository.save(make_sku("THD-LBR-0000003"))
        assert repository.exists_by_sku_code("THD-LBR-0000003") is True

    def test_save_all_is_all_or_nothing(self, repository):
        repository.save(make_sku("THD-LBR-0000001", upc="012345678901"))

        with pytest.raises(DuplicateKeyError):
            repository.save_all([
                make_sku("THD-LBR-0000002"),
                make_sku("THD-LBR-0000003", upc="012345678901"),
                make_sku("THD-LBR-0000004"),
            ])

        assert repository.exists_by_sku_code("THD-LBR-0000002") is False
        assert repository.exists_by_sku_code("THD-LBR-0000004") is False

    def test_not_null_violation_is_not_a_duplicate(self, repository):
        with pytest.raises(IntegrityError):
            repository.save(make_sku("THD-LBR-0000001", name=None))

        repository.save(make_sku("THD-LBR-0000001"))
        assert repository.exists_by_sku_code("THD-LBR-0000001") is True


def postgres_integrity_error(constraint_name: str) -> IntegrityError:
    """IntegrityError shaped like psycopg2's, with diag.constraint_name set"""
    orig = Exception("duplicate key value violates unique constraint")
    orig.diag = SimpleNamespace(constraint_name=constraint_name)
    return IntegrityError("INSERT INTO skus ...", {}, orig)


class TestIntegrityErrorTranslation:

    def test_postgres_upc_index(self):
        sku = make_sku("THD-LBR-0000001", upc="012345678901")

        error = SkuRepository._translate_integrity_error(postgres_integrity_error("ix_skus_upc"), [sku])

        assert error.field == "upc"
        assert error.value == "012345678901"

    def test_postgres_sku_code_index(self):
        sku = make_sku("THD-LBR-0000001")

        error = SkuRepository._translate_integrity_error(postgres_integrity_error("ix_skus_sku_code"), [sku])

        assert error.field == "sku_code"

    def test_postgres_other_constraint_is_left_alone(self):
        sku = make_sku("THD-LBR-0000001", upc="012345678901")

        assert SkuRepository._translate_integrity_error(postgres_integrity_error("ck_skus_status"), [sku]) is None

    def test_sqlite_message_naming_upc_outside_unique_is_left_alone(self):
        orig = Exception("NOT NULL constraint failed: skus.upc")
        error = IntegrityError("INSERT INTO skus ...", {}, orig)

        assert SkuRepository._translate_integrity_error(error, [make_sku("THD-LBR-0000001")]) is None


class TestFinders:

    def test_find_by_natural_keys(self, repository):
        saved = repository.save(make_sku("THD-LBR-0000001", upc="012345678901"))

        assert repository.find_by_id(saved.id).sku_code == "THD-LBR-0000001"
        assert repository.find_by_sku_code("THD-LBR-0000001").id == saved.id
        assert repository.find_by_upc("012345678901").id == saved.id

    def test_missing_returns_none(self, repository):
        assert repository.find_by_id(uuid4()) is None
        assert repository.find_by_sku_code("THD-LBR-0000001") is None
        assert repository.find_by_upc("012345678901") is None

    def test_find_page_sorts_and_counts(self, repository):
        repository.save_all([
            make_sku(f"THD-LBR-000000{i}", name=name, price=Decimal(price))
            for i, (name, price) in enumerate(
                [("Cedar", "3.00"), ("Ash", "9.00"), ("Birch", "6.00"), ("Oak", "12.00")],
                start=1,
            )
        ])

        page = repository.find_page(
            build_filter_predicate(min_price=Decimal("5")),
            PageRequest(page=1, per_page=2, sort=(SortOrder("price", descending=True),)),
        )

        assert page.total == 3
        assert page.total_pages == 2
        assert [s.name for s in page.items] == ["Oak", "Ash"]

        second = repository.find_page(
            build_filter_predicate(min_price=Decimal("5")),
            PageRequest(page=2, per_page=2, sort=(SortOrder("price", descending=True),)),
        )
        assert [s.name for s in second.items] == ["Birch"]
