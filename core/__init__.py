# File Explorer - Core Module
"""
Core infrastructure for the File Explorer.
Configuration, audit logging and the operation result type shared by
every filesystem module.
"""

from .config import ExplorerConfig
from .logger import AuditLogger, AuditEntry
from .results import OperationResult, ErrorKind

__all__ = [
    "ExplorerConfig",
    "AuditLogger",
    "AuditEntry",
    "OperationResult",
    "ErrorKind",
]

__version__ = "0.1.0"
