from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func
from database import Base

class TimestampedModel(Base):
    __abstract__ = True
    
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
