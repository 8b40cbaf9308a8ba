"""
Ledgerline Backend — Shared Service Plumbing
==============================================

What:  Base class for the per-resource services.
How:   Every operation is one statement sent through the gateway. `_run()`
       turns a StoreError into the operation's user-facing 500 message and
       logs the store code; `_update()` / `_delete()` implement the uniform
       PATCH and DELETE contracts (404 when no row matched).
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import Table, delete, update
from sqlalchemy.sql import Executable

from app.database import Gateway, QueryResult
from app.exceptions import ConflictError, NotFoundError, StoreError

logger = logging.getLogger(__name__)


class CrudService:
    """
    Stateless base: subclasses set `table` and `resource` ("User", ...).

    Subclasses may set `conflict_message` to report unique violations as
    409 instead of 500.
    """

    table: Table
    resource: str = "Resource"
    conflict_message: Optional[str] = None

    async def _run(
        self,
        gateway: Gateway,
        statement: Executable,
        action: str,
        failure_message: str,
    ) -> QueryResult:
        """
        Execute `statement`; on StoreError log "<action> failed" and re-raise
        with `failure_message` (or ConflictError for a unique violation).
        """
        try:
            return await gateway.execute(statement)
        except StoreError as e:
            if e.is_unique_violation and self.conflict_message:
                logger.info("%s rejected: unique constraint violated", action)
                raise ConflictError(self.conflict_message, context=e.context) from e
            logger.error(
                "%s failed: [%s] %s", action, e.code, e.context.get("detail", e.message)
            )
            raise e.with_message(failure_message) from e

    async def _update(
        self,
        gateway: Gateway,
        record_id: int,
        changes: Dict[str, Any],
    ) -> Dict[str, Any]:
        """UPDATE ... SET <changes> WHERE id = :id RETURNING *; 404 when absent."""
        statement = (
            update(self.table)
            .where(self.table.c.id == record_id)
            .values(**changes)
            .returning(*self.table.c)
        )
        result = await self._run(
            gateway,
            statement,
            action=f"Update {self.resource.lower()}",
            failure_message=f"Could not update {self.resource.lower()}",
        )
        if result.row_count == 0:
            raise NotFoundError(resource=self.resource, resource_id=record_id)
        return result.rows[0]

    async def _delete(self, gateway: Gateway, record_id: int) -> Dict[str, Any]:
        """DELETE ... WHERE id = :id RETURNING *; 404 when absent."""
        statement = (
            delete(self.table)
            .where(self.table.c.id == record_id)
            .returning(*self.table.c)
        )
        result = await self._run(
            gateway,
            statement,
            action=f"Delete {self.resource.lower()}",
            failure_message=f"Could not delete {self.resource.lower()}",
        )
        if result.row_count == 0:
            raise NotFoundError(resource=self.resource, resource_id=record_id)
        return result.rows[0]
