"""Tests for catalog service."""

import pytest

from pantry_tracker.domain.units import Conversion
from pantry_tracker.services.catalog import CatalogService
from tests.conftest import CUP, GRAM, OWNER_ID, PIECE, TBSP, InMemoryUnitRepository


def test_convertible_units_follow_direct_edges(units) -> None:
    service = CatalogService(InMemoryUnitRepository(units))

    targets = service.convertible_units(OWNER_ID, CUP)

    assert [unit.id for unit in targets] == [TBSP, GRAM]
    assert service.convertible_units(OWNER_ID, PIECE) == []
    assert service.convertible_units(OWNER_ID, "unknown") == []


def test_convert_uses_owner_catalog(units) -> None:
    service = CatalogService(InMemoryUnitRepository(units))

    assert service.convert(OWNER_ID, CUP, TBSP, 0.5) == 8
    assert service.convert("u2", CUP, TBSP, 0.5) is None


def test_add_conversion_replaces_existing_edge(units) -> None:
    repository = InMemoryUnitRepository(units)
    service = CatalogService(repository)

    updated = service.add_conversion(OWNER_ID, CUP, TBSP, 15)

    assert updated.conversions == (Conversion(GRAM, 120), Conversion(TBSP, 15))
    assert service.convert(OWNER_ID, CUP, TBSP, 1) == 15


def test_add_conversion_creates_new_edge(units) -> None:
    service = CatalogService(InMemoryUnitRepository(units))

    service.add_conversion(OWNER_ID, GRAM, CUP, 1 / 120)

    assert service.convert(OWNER_ID, GRAM, CUP, 240) == pytest.approx(2)


@pytest.mark.parametrize(
    ("unit_id", "target_id", "factor", "error"),
    [
        (CUP, TBSP, 0, ValueError),
        (CUP, CUP, 1, ValueError),
        ("unknown", CUP, 1, LookupError),
        (CUP, "unknown", 1, LookupError),
    ],
)
def test_add_conversion_validates_input(
    units, unit_id, target_id, factor, error
) -> None:
    service = CatalogService(InMemoryUnitRepository(units))

    with pytest.raises(error):
        service.add_conversion(OWNER_ID, unit_id, target_id, factor)


@pytest.mark.parametrize("factor", [float("nan"), float("inf"), -1])
def test_add_conversion_rejects_invalid_factor(units, factor) -> None:
    repository = InMemoryUnitRepository(units)
    service = CatalogService(repository)

    with pytest.raises(ValueError):
        service.add_conversion(OWNER_ID, GRAM, CUP, factor)
    assert repository.get_unit(OWNER_ID, GRAM).conversions == ()


def test_create_unit_trims_name() -> None:
    repository = InMemoryUnitRepository()
    service = CatalogService(repository)

    unit = service.create_unit(OWNER_ID, "  pinch ")

    assert unit.name == "pinch"
    assert unit.conversions == ()
    assert service.list_units(OWNER_ID) == [unit]


def test_create_unit_rejects_blank_name() -> None:
    service = CatalogService(InMemoryUnitRepository())

    with pytest.raises(ValueError):
        service.create_unit(OWNER_ID, "   ")


def test_created_unit_can_take_conversions(units) -> None:
    service = CatalogService(InMemoryUnitRepository(units))

    pinch = service.create_unit(OWNER_ID, "pinch")
    service.add_conversion(OWNER_ID, TBSP, pinch.id, 16)

    assert service.convert(OWNER_ID, TBSP, pinch.id, 0.5) == 8


def test_rename_unit_keeps_conversions(units) -> None:
    service = CatalogService(InMemoryUnitRepository(units))

    renamed = service.rename_unit(OWNER_ID, CUP, "Cup ")

    assert renamed.name == "Cup"
    assert renamed.conversions == (Conversion(TBSP, 16), Conversion(GRAM, 120))
    with pytest.raises(LookupError):
        service.rename_unit(OWNER_ID, "unknown", "x")


def test_remove_conversion_drops_edge(units) -> None:
    repository = InMemoryUnitRepository(units)
    service = CatalogService(repository)

    updated = service.remove_conversion(OWNER_ID, CUP, TBSP)

    assert updated.conversions == (Conversion(GRAM, 120),)
    assert service.convert(OWNER_ID, CUP, TBSP, 1) is None
    assert service.convert(OWNER_ID, TBSP, CUP, 16) == 1


def test_remove_missing_conversion_is_noop(units) -> None:
    repository = InMemoryUnitRepository(units)
    service = CatalogService(repository)

    unit = service.remove_conversion(OWNER_ID, PIECE, CUP)

    assert unit == repository.get_unit(OWNER_ID, PIECE)
    with pytest.raises(LookupError):
        service.remove_conversion(OWNER_ID, "unknown", CUP)
