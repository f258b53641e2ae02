"""
MedRestock Bootstrap — Public API
===================================
Composes the restock system over a single store.
"""

from core.bootstrap.errors import SystemBootstrapError
from core.bootstrap.system import RestockSystem, build_restock_system

__all__ = [
    "SystemBootstrapError",
    "RestockSystem",
    "build_restock_system",
]
