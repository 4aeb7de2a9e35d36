"""
Repository Layer Package.

============================================================
PURPOSE
============================================================
The Repository Layer is the ONLY gateway to the database.

1. Session Injection: sessions are injected, not created internally
2. Explicit Methods: clear method names, no generic execute
3. Exception Handling: all DB errors raised as StoreUnavailableError

============================================================
"""

from storage.repositories.base import BaseRepository
from storage.repositories.waste import DepartmentBaselineRepository, WasteEventRepository

__all__ = [
    "BaseRepository",
    "DepartmentBaselineRepository",
    "WasteEventRepository",
]
