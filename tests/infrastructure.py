"""
In-memory stand-in for the asyncpg pool
Interprets the statements issued by the dashboard services so tests run without PostgreSQL
"""

import asyncio
import re
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

from invoice_dashboard.services import invoice_actions, invoice_queries


class ForeignKeyViolation(Exception):
    """Raised like the store would for an unknown customer_id"""


def ilike(value: Optional[str], pattern: str) -> bool:
    """PostgreSQL ILIKE with backslash escapes; NULL never matches"""
    if value is None:
        return False

    regex = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            regex.append(re.escape(next(chars, "\\")))
        elif char == "%":
            regex.append(".*")
        elif char == "_":
            regex.append(".")
        else:
            regex.append(re.escape(char))
    return re.fullmatch("".join(regex), str(value), re.IGNORECASE | re.DOTALL) is not None


class InMemoryStore:
    """Tables plus a log of every statement the services ran"""

    def __init__(self):
        self.customers: Dict[str, Dict[str, Any]] = {}
        self.invoices: Dict[str, Dict[str, Any]] = {}
        self.revenue: List[Dict[str, Any]] = []
        self.statements: List[Tuple[str, tuple]] = []
        self.fail_with: Optional[Exception] = None
        self.in_flight = 0
        self.max_in_flight = 0

    def add_customer(self, customer: Dict[str, Any]) -> Dict[str, Any]:
        self.customers[customer["id"]] = dict(customer)
        return customer

    def add_invoice(self, invoice: Dict[str, Any]) -> Dict[str, Any]:
        self.invoices[invoice["id"]] = dict(invoice)
        return invoice

    # Query emulation

    def _joined(self, inner: bool) -> List[Dict[str, Any]]:
        rows = []
        for invoice in self.invoices.values():
            customer = self.customers.get(invoice["customer_id"])
            if customer is None and inner:
                continue
            customer = customer or {}
            rows.append({
                "id": invoice["id"],
                "amount": invoice["amount"],
                "date": invoice["date"],
                "status": invoice["status"],
                "name": customer.get("name"),
                "email": customer.get("email"),
                "image_url": customer.get("image_url"),
            })
        return rows

    def _search(self, sql: str, args: tuple) -> Tuple[List[Dict[str, Any]], tuple]:
        rows = self._joined(inner=False)
        if "ILIKE" in sql:
            pattern, args = args[0], args[1:]
            rows = [
                row for row in rows
                if any(ilike(row[key], pattern) for key in ("id", "status", "name", "email"))
            ]
        rows.sort(key=lambda row: row["id"])
        rows.sort(key=lambda row: row["date"], reverse=True)
        return rows, args

    def fetch(self, sql: str, args: tuple) -> List[Dict[str, Any]]:
        if sql == invoice_queries.REVENUE_SQL:
            return [dict(row) for row in self.revenue]
        if sql == invoice_queries.LATEST_INVOICES_SQL:
            rows = self._joined(inner=True)
            rows.sort(key=lambda row: row["date"], reverse=True)
            return rows[:args[0]]
        if sql == invoice_queries.CUSTOMERS_SQL:
            rows = [{"id": c["id"], "name": c["name"]} for c in self.customers.values()]
            return sorted(rows, key=lambda row: row["name"])
        if "LEFT JOIN customers" in sql and "LIMIT" in sql:
            rows, (limit, offset) = self._search(sql, args)
            return rows[offset:offset + limit]
        raise AssertionError(f"Unexpected fetch: {sql}")

    def fetchval(self, sql: str, args: tuple) -> Any:
        if sql == "SELECT 1":
            return 1
        if sql == invoice_queries.INVOICE_COUNT_SQL:
            return len(self.invoices)
        if sql == invoice_queries.CUSTOMER_COUNT_SQL:
            return len(self.customers)
        if "SELECT COUNT(*)" in sql and "LEFT JOIN customers" in sql:
            rows, _ = self._search(sql, args)
            return len(rows)
        raise AssertionError(f"Unexpected fetchval: {sql}")

    def fetchrow(self, sql: str, args: tuple) -> Optional[Dict[str, Any]]:
        if sql == invoice_queries.INVOICE_STATUS_SQL:
            if not self.invoices:
                # SUM over no rows is NULL
                return {"paid": None, "pending": None}
            return {
                status: sum(i["amount"] for i in self.invoices.values() if i["status"] == status)
                for status in ("paid", "pending")
            }
        if sql == invoice_queries.INVOICE_BY_ID_SQL:
            invoice = self.invoices.get(args[0])
            if invoice is None:
                return None
            return {key: invoice[key] for key in ("id", "customer_id", "amount", "status")}
        raise AssertionError(f"Unexpected fetchrow: {sql}")

    def execute(self, sql: str, args: tuple) -> str:
        if sql == invoice_actions.INSERT_INVOICE_SQL:
            customer_id, amount, status, invoice_date = args
            if customer_id not in self.customers:
                raise ForeignKeyViolation('insert or update on table "invoices" violates foreign key constraint')
            invoice_id = str(uuid.uuid4())
            self.invoices[invoice_id] = {
                "id": invoice_id,
                "customer_id": customer_id,
                "amount": amount,
                "status": status,
                "date": invoice_date,
            }
            return "INSERT 0 1"
        if sql == invoice_actions.UPDATE_INVOICE_SQL:
            customer_id, amount, status, invoice_id = args
            if customer_id not in self.customers:
                raise ForeignKeyViolation('insert or update on table "invoices" violates foreign key constraint')
            invoice = self.invoices.get(invoice_id)
            if invoice is None:
                return "UPDATE 0"
            invoice.update(customer_id=customer_id, amount=amount, status=status)
            return "UPDATE 1"
        if sql == invoice_actions.DELETE_INVOICE_SQL:
            removed = self.invoices.pop(args[0], None)
            return f"DELETE {1 if removed else 0}"
        raise AssertionError(f"Unexpected execute: {sql}")


class FakeConnection:
    """Mimics the asyncpg connection methods the services use"""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def _run(self, method: str, sql: str, args: tuple) -> Any:
        store = self.store
        store.statements.append((sql, args))
        store.in_flight += 1
        store.max_in_flight = max(store.max_in_flight, store.in_flight)
        try:
            # Yield so concurrent callers overlap
            await asyncio.sleep(0)
            if store.fail_with is not None:
                raise store.fail_with
            return getattr(store, method)(sql, args)
        finally:
            store.in_flight -= 1

    async def fetch(self, sql: str, *args):
        return await self._run("fetch", sql, args)

    async def fetchval(self, sql: str, *args):
        return await self._run("fetchval", sql, args)

    async def fetchrow(self, sql: str, *args):
        return await self._run("fetchrow", sql, args)

    async def execute(self, sql: str, *args):
        return await self._run("execute", sql, args)


class FakePool:
    """Mimics asyncpg.Pool: acquire() plus the pool-level query shortcuts"""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.closed = False

    async def close(self):
        self.closed = True

    @asynccontextmanager
    async def acquire(self):
        yield FakeConnection(self.store)

    async def fetch(self, sql: str, *args):
        async with self.acquire() as conn:
            return await conn.fetch(sql, *args)

    async def fetchval(self, sql: str, *args):
        async with self.acquire() as conn:
            return await conn.fetchval(sql, *args)

    async def fetchrow(self, sql: str, *args):
        async with self.acquire() as conn:
            return await conn.fetchrow(sql, *args)

    async def execute(self, sql: str, *args):
        async with self.acquire() as conn:
            return await conn.execute(sql, *args)
