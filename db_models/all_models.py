"""
Import all models to ensure they are registered with SQLAlchemy
"""

from db_models.base import TimestampedModel
from db_models.kv_entry import KVEntry

# Export all models
__all__ = [
    "TimestampedModel",
    "KVEntry",
]
