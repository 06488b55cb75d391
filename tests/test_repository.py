"""Tests for the SQLAlchemy product repository.

These run the repository directly against a SQLite file database, one
event loop per test, without going through HTTP.
"""
import asyncio
from decimal import Decimal

import pytest

from product_api.database import build_engine, build_session_maker, create_tables
from product_api.exceptions import ProductNotFoundError
from product_api.models import Product
from product_api.repository import SqlAlchemyProductRepository


@pytest.fixture
def run_scenario(tmp_path):
    """Run ``scenario(session_maker)`` on a fresh database and return its result."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'repository_test.db'}"

    def _run(scenario):
        async def _main():
            engine = build_engine(url)
            try:
                await create_tables(engine)
                return await scenario(build_session_maker(engine))
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return _run


async def _seed(session_maker, *rows):
    async with session_maker() as session:
        repo = SqlAlchemyProductRepository(session)
        for name, price in rows:
            await repo.add(Product(name=name, description=f"{name} description", price=Decimal(str(price))))


class TestSqlAlchemyProductRepository:

    def test_add_assigns_id_to_passed_object(self, run_scenario):
        async def scenario(session_maker):
            async with session_maker() as session:
                repo = SqlAlchemyProductRepository(session)
                product = Product(name="Pen", description="Blue pen", price=Decimal("1.50"))
                returned = await repo.add(product)
                return product.id, returned is product

        product_id, same_object = run_scenario(scenario)
        assert product_id == 1
        assert same_object

    def test_get_by_id(self, run_scenario):
        async def scenario(session_maker):
            await _seed(session_maker, ("Pen", 1.5))
            async with session_maker() as session:
                repo = SqlAlchemyProductRepository(session)
                found = await repo.get_by_id(1)
                missing = await repo.get_by_id(2)
                return found, missing

        found, missing = run_scenario(scenario)
        assert found.name == "Pen"
        assert found.description == "Pen description"
        assert found.price == Decimal("1.50")
        assert missing is None

    def test_get_all_empty(self, run_scenario):
        async def scenario(session_maker):
            async with session_maker() as session:
                return await SqlAlchemyProductRepository(session).get_all()

        assert run_scenario(scenario) == []

    def test_get_all_filters_and_sorts(self, run_scenario):
        async def scenario(session_maker):
            await _seed(session_maker, ("Stapler", 12.5), ("Pen", 3), ("pencil", 0.5), ("Pen holder", 3))
            async with session_maker() as session:
                repo = SqlAlchemyProductRepository(session)
                return {
                    "all": [p.name for p in await repo.get_all()],
                    "filtered": [p.name for p in await repo.get_all(name="Pen")],
                    "by_price": [p.name for p in await repo.get_all(sort_by="price")],
                    "by_name": [p.name for p in await repo.get_all(sort_by="name")],
                    "unknown": [p.name for p in await repo.get_all(sort_by="colour")],
                    "filtered_by_name": [p.name for p in await repo.get_all(name="pen", sort_by="name")],
                }

        result = run_scenario(scenario)
        assert result["all"] == ["Stapler", "Pen", "pencil", "Pen holder"]
        assert result["filtered"] == ["Pen", "Pen holder"]
        assert result["by_price"] == ["pencil", "Pen", "Pen holder", "Stapler"]
        # ordinal ordering: upper case sorts before lower case
        assert result["by_name"] == ["Pen", "Pen holder", "Stapler", "pencil"]
        assert result["unknown"] == result["all"]
        assert result["filtered_by_name"] == ["pencil"]

    def test_update_persists_changes(self, run_scenario):
        async def scenario(session_maker):
            await _seed(session_maker, ("Pen", 1.5))
            async with session_maker() as session:
                repo = SqlAlchemyProductRepository(session)
                product = await repo.get_by_id(1)
                product.price = Decimal("2.25")
                await repo.update(product)
            async with session_maker() as session:
                return await SqlAlchemyProductRepository(session).get_by_id(1)

        product = run_scenario(scenario)
        assert product.price == Decimal("2.25")
        assert product.name == "Pen"

    def test_update_of_row_deleted_elsewhere_raises_not_found(self, run_scenario):
        async def scenario(session_maker):
            await _seed(session_maker, ("Pen", 1.5))
            async with session_maker() as writer, session_maker() as deleter:
                writer_repo = SqlAlchemyProductRepository(writer)
                product = await writer_repo.get_by_id(1)

                assert await SqlAlchemyProductRepository(deleter).delete(1) is True

                product.price = Decimal("9.00")
                with pytest.raises(ProductNotFoundError) as exc_info:
                    await writer_repo.update(product)
                return exc_info.value.product_id

        assert run_scenario(scenario) == 1

    def test_delete(self, run_scenario):
        async def scenario(session_maker):
            await _seed(session_maker, ("Pen", 1.5), ("Mug", 7))
            async with session_maker() as session:
                repo = SqlAlchemyProductRepository(session)
                removed = await repo.delete(1)
                removed_again = await repo.delete(1)
                remaining = [p.name for p in await repo.get_all()]
                return removed, removed_again, remaining

        removed, removed_again, remaining = run_scenario(scenario)
        assert removed is True
        assert removed_again is False
        assert remaining == ["Mug"]
