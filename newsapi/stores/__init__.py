# Stores package.
#
# ``base.NewsStorer`` is the contract the routers depend on; each other
# module is one backend for it:
#
#   memory : process-local dict, used for local runs and tests
#   sql    : SQLAlchemy async session over the ``news`` table
#
# The Redis cache-aside decorator lives in ``newsapi.cache`` and wraps
# any of them.
from newsapi.stores.base import NewsStorer
from newsapi.stores.memory import InMemoryNewsStore
from newsapi.stores.sql import SqlNewsStore

__all__ = ["NewsStorer", "InMemoryNewsStore", "SqlNewsStore"]
