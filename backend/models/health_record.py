from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from database.config import Base, utcnow


class HealthRecord(Base):
    __tablename__ = "health_records"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    record_type = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    # Address returned by the content store; one record per blob
    content_address = Column(String(255), unique=True, nullable=False)
    transaction_ref = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<HealthRecord id={self.id} owner_id={self.owner_id}>"
