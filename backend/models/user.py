from sqlalchemy import Column, Integer, String, DateTime

from database.config import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(64), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    # Opaque chain address; providers are matched against grants by this value
    wallet_address = Column(String(128), unique=True, index=True, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User id={self.id} username={self.username!r}>"
