"""Unit tests for the UPC uniqueness guard"""

from unittest.mock import Mock

import pytest

from sku_service.domain.sku import DuplicateKeyError, SkuRepositoryPort, UniquenessGuard


def make_guard(existing_upcs=()) -> tuple[UniquenessGuard, Mock]:
    repository = Mock(spec=SkuRepositoryPort)
    repository.exists_by_upc.side_effect = lambda upc: upc in existing_upcs
    return UniquenessGuard(repository), repository


class TestCreateCheck:

    def test_new_upc_passes(self):
        guard, _ = make_guard()
        guard.validate_upc("012345678901")

    def test_existing_upc_rejected(self):
        guard, _ = make_guard({"012345678901"})

        with pytest.raises(DuplicateKeyError) as exc_info:
            guard.validate_upc("012345678901")

        assert exc_info.value.field == "upc"
        assert exc_info.value.value == "012345678901"
        assert str(exc_info.value) == "SKU with UPC 012345678901 already exists"

    def test_missing_upc_never_checked(self):
        guard, repository = make_guard()
        guard.validate_upc(None)
        repository.exists_by_upc.assert_not_called()


class TestUpdateCheck:

    def test_unchanged_upc_is_not_checked(self):
        """Re-saving a SKU with its own UPC must not conflict with itself"""
        guard, repository = make_guard({"012345678901"})

        guard.validate_upc_change("012345678901", "012345678901")

        repository.exists_by_upc.assert_not_called()

    def test_changed_upc_taken_by_other_sku(self):
        guard, _ = make_guard({"111111111111"})

        with pytest.raises(DuplicateKeyError):
            guard.validate_upc_change("111111111111", "012345678901")

    def test_changed_upc_free(self):
        guard, repository = make_guard({"012345678901"})

        guard.validate_upc_change("222222222222", "012345678901")

        repository.exists_by_upc.assert_called_once_with("222222222222")

    def test_clearing_upc_never_conflicts(self):
        guard, repository = make_guard({"012345678901"})
        guard.validate_upc_change(None, "012345678901")
        repository.exists_by_upc.assert_not_called()


class TestBatchCheck:

    def test_all_distinct_and_new(self):
        guard, repository = make_guard()

        guard.validate_batch_upcs(["111111111111", None, "222222222222"])

        assert repository.exists_by_upc.call_count == 2

    def test_duplicate_within_batch_rejected_before_storage(self):
        guard, repository = make_guard()

        with pytest.raises(DuplicateKeyError) as exc_info:
            guard.validate_batch_upcs(["111111111111", "222222222222", "111111111111"])

        assert "more than once" in str(exc_info.value)
        repository.exists_by_upc.assert_not_called()

    def test_first_stored_collision_aborts(self):
        guard, repository = make_guard({"222222222222"})

        with pytest.raises(DuplicateKeyError) as exc_info:
            guard.validate_batch_upcs(["111111111111", "222222222222", "333333333333"])

        assert exc_info.value.value == "222222222222"
        assert repository.exists_by_upc.call_count == 2

    def test_missing_upcs_may_repeat(self):
        guard, _ = make_guard()
        guard.validate_batch_upcs([None, None, None])
