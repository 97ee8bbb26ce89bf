from sqlalchemy import Column, Integer, String, DateTime, Text

from database.config import Base, utcnow


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, index=True)
    action = Column(String(100), nullable=False)
    record_id = Column(Integer)
    grant_id = Column(Integer)
    ip_address = Column(String(45))
    user_agent = Column(Text)
    detail = Column(Text)
    timestamp = Column(DateTime, default=utcnow)
    status = Column(String(20))
