import uuid

from sqlalchemy import Column, String, DateTime, func
from ponto.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the identity provider's user
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(120), unique=True, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(String(20), nullable=False, default="colaborador")  # 'colaborador', 'gestor', 'admin'
    avatar_url = Column(String(500))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
