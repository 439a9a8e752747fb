"""
Database pool lifecycle
"""

from invoice_dashboard.database import connection

from infrastructure import FakePool


async def test_pool_is_created_with_configured_ssl_mode(store, monkeypatch):
    created = {}
    pool = FakePool(store)

    async def create_pool(dsn, **kwargs):
        created.update(kwargs, dsn=dsn)
        return pool

    monkeypatch.setattr(connection.asyncpg, "create_pool", create_pool)

    await connection.init_database()
    try:
        assert connection.get_db_pool() is pool
        assert created["ssl"] == "disable"
        assert created["dsn"] == connection.DATABASE_URL
        assert store.statements == [("SELECT 1", ())]
    finally:
        await connection.close_database()

    assert pool.closed
    assert connection.get_db_pool() is None
