from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey
from ponto.database import Base
from ponto.utils.datetime_utils import utc_now


class AuditLogEntry(Base):
    """Append-only record of security and workflow actions"""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    action = Column(String(50), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    details = Column(JSON, default=dict)
