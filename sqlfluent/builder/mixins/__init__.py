"""SQL statement builder mixins."""

from sqlfluent.builder.mixins._from import TableClauseMixin
from sqlfluent.builder.mixins._join import JoinClauseMixin
from sqlfluent.builder.mixins._limit_offset import LimitOffsetClauseMixin
from sqlfluent.builder.mixins._order_by import GroupByClauseMixin, HavingClauseMixin, OrderByClauseMixin
from sqlfluent.builder.mixins._select_columns import SelectColumnsMixin
from sqlfluent.builder.mixins._where import WhereClauseMixin

__all__ = (
    "GroupByClauseMixin",
    "HavingClauseMixin",
    "JoinClauseMixin",
    "LimitOffsetClauseMixin",
    "OrderByClauseMixin",
    "SelectColumnsMixin",
    "TableClauseMixin",
    "WhereClauseMixin",
)
