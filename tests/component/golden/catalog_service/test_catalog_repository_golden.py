"""
Catalog Repository Component Golden Tests

A concurrent insert can pass the service's SKU check and still hit the
unique index; the repository turns that into a conflict.

Usage:
    pytest tests/component/golden/catalog_service/test_catalog_repository_golden.py -v
"""
import asyncpg
import pytest

from services.catalog_service.catalog_repository import CatalogRepository
from services.catalog_service.protocols import DuplicateSkuError

pytestmark = [pytest.mark.component, pytest.mark.golden, pytest.mark.asyncio]


class UniqueIndexDb:
    """Database stand-in whose writes all violate the sku unique index"""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def query_value(self, sql, params=None):
        raise asyncpg.UniqueViolationError('duplicate key value violates unique constraint "items_sku_key"')

    async def execute(self, sql, params=None):
        raise asyncpg.UniqueViolationError('duplicate key value violates unique constraint "items_sku_key"')


@pytest.fixture
def repository():
    return CatalogRepository(db=UniqueIndexDb())


async def test_create_with_taken_sku_is_conflict(repository):
    with pytest.raises(DuplicateSkuError, match='SKU "BEEF-01" already exists'):
        await repository.create_product({"name": "Beef", "sku": "BEEF-01", "unit": "kg", "type": "material"})


async def test_update_to_taken_sku_is_conflict(repository):
    with pytest.raises(DuplicateSkuError, match='SKU "BEEF-01" already exists'):
        await repository.update_product(7, {"sku": "BEEF-01"})
