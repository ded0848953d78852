from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pomoplus.models.base import Base


class Tag(Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
