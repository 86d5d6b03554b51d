from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from .base import Base, now_utc


class ReplayedOperation(Base):
    """Outcome of an offline client operation, keyed by the client's operation id."""
    __tablename__ = 'replayed_operations'
    operation_id = Column(String(128), primary_key=True)
    operation_type = Column(String(32), nullable=True)
    method = Column(String(8), nullable=False)
    url = Column(Text, nullable=False)
    status = Column(String(16), nullable=False)
    http_status = Column(Integer, nullable=False)
    # created record id, when the operation created one
    result_id = Column(Integer, nullable=True)
    response = Column(JSON, nullable=True)
    applied_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
