"""Tests for inventory service."""

import pytest

from pantry_tracker.domain.inventory import DeductionRequest, InventoryRecord
from pantry_tracker.services.inventory import InventoryService
from tests.conftest import CUP, OWNER_ID, PIECE, TBSP, InMemoryInventoryRepository


def test_add_stock_merges_same_unit() -> None:
    repository = InMemoryInventoryRepository(
        [InventoryRecord(OWNER_ID, "flour", CUP, 1)]
    )
    service = InventoryService(repository)

    service.add_stock(OWNER_ID, "flour", CUP, 2)
    service.add_stock(OWNER_ID, "flour", TBSP, 4)

    assert repository.records == [
        InventoryRecord(OWNER_ID, "flour", CUP, 3),
        InventoryRecord(OWNER_ID, "flour", TBSP, 4),
    ]


@pytest.mark.parametrize("quantity", [0, -2, float("nan"), float("inf")])
def test_add_stock_rejects_invalid_quantity(quantity) -> None:
    repository = InMemoryInventoryRepository()
    service = InventoryService(repository)

    with pytest.raises(ValueError):
        service.add_stock(OWNER_ID, "flour", CUP, quantity)
    assert repository.saves == 0


def test_set_stock_moves_record_to_new_unit() -> None:
    repository = InMemoryInventoryRepository(
        [
            InventoryRecord(OWNER_ID, "flour", CUP, 1),
            InventoryRecord(OWNER_ID, "flour", TBSP, 4),
        ]
    )
    service = InventoryService(repository)

    updated = service.set_stock(OWNER_ID, "flour", CUP, TBSP, 2)

    assert updated == [InventoryRecord(OWNER_ID, "flour", TBSP, 6)]


def test_set_stock_overwrites_quantity() -> None:
    repository = InMemoryInventoryRepository(
        [InventoryRecord(OWNER_ID, "flour", CUP, 1)]
    )
    service = InventoryService(repository)

    updated = service.set_stock(OWNER_ID, "flour", CUP, CUP, 5)

    assert updated == [InventoryRecord(OWNER_ID, "flour", CUP, 5)]


def test_set_stock_requires_existing_record() -> None:
    service = InventoryService(InMemoryInventoryRepository())

    with pytest.raises(LookupError):
        service.set_stock(OWNER_ID, "flour", CUP, CUP, 1)


def test_remove_stock_drops_only_matching_record() -> None:
    repository = InMemoryInventoryRepository(
        [
            InventoryRecord(OWNER_ID, "flour", CUP, 1),
            InventoryRecord(OWNER_ID, "flour", TBSP, 4),
        ]
    )
    service = InventoryService(repository)

    service.remove_stock(OWNER_ID, "flour", CUP)
    service.remove_stock(OWNER_ID, "flour", PIECE)

    assert repository.records == [InventoryRecord(OWNER_ID, "flour", TBSP, 4)]


def test_check_is_scoped_to_owner(units) -> None:
    repository = InMemoryInventoryRepository(
        [
            InventoryRecord(OWNER_ID, "flour", CUP, 1),
            InventoryRecord("u2", "flour", CUP, 10),
        ]
    )
    service = InventoryService(repository)

    availability = service.check(OWNER_ID, "flour", CUP, 2, units)

    assert availability.sufficient is False
    assert availability.available == 1


def test_deduct_persists_updated_inventory(units) -> None:
    repository = InMemoryInventoryRepository(
        [
            InventoryRecord(OWNER_ID, "flour", CUP, 3),
            InventoryRecord("u2", "flour", CUP, 3),
        ]
    )
    service = InventoryService(repository)

    result = service.deduct(DeductionRequest("flour", CUP, 1, OWNER_ID), units)

    assert result.remaining == 0
    assert repository.records == [
        InventoryRecord("u2", "flour", CUP, 3),
        InventoryRecord(OWNER_ID, "flour", CUP, 2),
    ]


def test_deduct_without_stock_does_not_save(units) -> None:
    repository = InMemoryInventoryRepository()
    service = InventoryService(repository)

    result = service.deduct(DeductionRequest("flour", CUP, 1, OWNER_ID), units)

    assert result.deducted == []
    assert repository.saves == 0


def test_custom_epsilon_is_applied(units) -> None:
    repository = InMemoryInventoryRepository(
        [InventoryRecord(OWNER_ID, "flour", CUP, 1.05)]
    )
    service = InventoryService(repository, epsilon=0.1)

    service.deduct(DeductionRequest("flour", CUP, 1, OWNER_ID), units)

    assert repository.records == []


@pytest.mark.parametrize("quantity", [float("nan"), float("inf")])
def test_set_stock_rejects_non_finite_quantity(quantity) -> None:
    repository = InMemoryInventoryRepository(
        [InventoryRecord(OWNER_ID, "flour", CUP, 1)]
    )
    service = InventoryService(repository)

    with pytest.raises(ValueError):
        service.set_stock(OWNER_ID, "flour", CUP, CUP, quantity)
    assert repository.records == [InventoryRecord(OWNER_ID, "flour", CUP, 1)]


@pytest.mark.parametrize("quantity", [float("nan"), float("inf"), float("-inf")])
def test_deduct_rejects_non_finite_requirement(units, quantity) -> None:
    repository = InMemoryInventoryRepository(
        [InventoryRecord(OWNER_ID, "flour", CUP, 3)]
    )
    service = InventoryService(repository)

    with pytest.raises(ValueError):
        service.deduct(DeductionRequest("flour", CUP, quantity, OWNER_ID), units)
    with pytest.raises(ValueError):
        service.check(OWNER_ID, "flour", CUP, quantity, units)
    assert repository.records == [InventoryRecord(OWNER_ID, "flour", CUP, 3)]
    assert repository.saves == 0
