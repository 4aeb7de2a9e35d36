"""
Storage Models Package.

ORM models for the waste intelligence database.

- base.py: Declarative base
- waste.py: WasteEventRecord, DepartmentBaselineRecord
"""

from storage.models.base import Base
from storage.models.waste import DepartmentBaselineRecord, WasteEventRecord

__all__ = [
    "Base",
    "DepartmentBaselineRecord",
    "WasteEventRecord",
]
