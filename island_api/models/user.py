import uuid

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import String
from sqlalchemy.sql import func

from island_api.core.database import Base
from island_api.schemas.user import UserRole, UserStatus


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True,
                default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    email_verified = Column(DateTime(timezone=True), nullable=True)
    image = Column(String(255), nullable=True)
    role = Column(SQLEnum(UserRole), default=UserRole.user, nullable=False)
    status = Column(SQLEnum(UserStatus),
                    default=UserStatus.pending, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
