from sqlalchemy import Column, String, JSON
from db_models.base import TimestampedModel

class KVEntry(TimestampedModel):
    __tablename__ = "kv_store"
    
    key = Column(String(255), primary_key=True)
    value = Column(JSON, nullable=False)  # Stored document, e.g. a validation result
