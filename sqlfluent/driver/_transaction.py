"""Nested transactions emulated with savepoints."""

import logging
from typing import TYPE_CHECKING

from sqlfluent.exceptions import DriverError
from sqlfluent.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqlfluent.protocols import ConnectionProtocol

__all__ = ("SAVEPOINT_PREFIX", "TransactionMixin")

logger = get_logger("driver.transaction")

SAVEPOINT_PREFIX = "trans"


class TransactionMixin:
    """Depth-counting transaction control.

    The outermost :meth:`begin` starts a real transaction; nested calls create
    ``SAVEPOINT trans<depth>``. An inner :meth:`commit` only lowers the depth and
    releases nothing, while an inner :meth:`rollback` rolls back to the savepoint of
    the level being left. The depth returns to zero whenever the handle resets for
    a new statement.
    """

    __slots__ = ()

    connection: "ConnectionProtocol"
    _transaction_depth: int

    @property
    def transaction_depth(self) -> int:
        return self._transaction_depth

    def begin(self) -> bool:
        """Open a transaction, or a savepoint when one is already open.

        Returns:
            The driver's result for a real transaction, always True for a savepoint.
        """
        depth = self._transaction_depth
        self._transaction_depth += 1
        if depth == 0:
            return self.connection.begin()
        self._run_savepoint_statement(f"SAVEPOINT {SAVEPOINT_PREFIX}{self._transaction_depth}")
        return True

    def commit(self) -> bool:
        """Commit the outermost transaction; inner levels just lower the depth.

        Returns:
            False without touching the driver when no transaction is open.
        """
        if self._transaction_depth == 0:
            logger.warning("commit() called without an open transaction")
            return False
        self._transaction_depth -= 1
        if self._transaction_depth == 0:
            return self.connection.commit()
        return True

    def rollback(self) -> bool:
        """Roll back to the current savepoint, or the whole transaction at the outermost level.

        Returns:
            False without touching the driver when no transaction is open.
        """
        if self._transaction_depth == 0:
            logger.warning("rollback() called without an open transaction")
            return False
        self._transaction_depth -= 1
        if self._transaction_depth > 0:
            self._run_savepoint_statement(f"ROLLBACK TO {SAVEPOINT_PREFIX}{self._transaction_depth + 1}")
            return True
        return self.connection.rollback()

    def _run_savepoint_statement(self, sql: str) -> None:
        log_with_context(logger, logging.DEBUG, "transaction.savepoint", sql=sql)
        try:
            self.connection.execute(sql)
        except DriverError as exc:
            log_with_context(logger, logging.WARNING, "transaction.savepoint_failed", sql=sql, error=str(exc))
