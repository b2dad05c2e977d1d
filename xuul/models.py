"""Database tables."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

_JSON = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class Aerich(Base):
    __tablename__ = "aerich"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    version: Mapped[str] = mapped_column(String)
    app: Mapped[str] = mapped_column(String)
    content: Mapped[Any] = mapped_column(_JSON)


class Apilist(Base):
    __tablename__ = "apilist"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True)
    path: Mapped[str] = mapped_column(String, unique=True)
    introduce: Mapped[str | None] = mapped_column(String, nullable=True)
    request_parameters: Mapped[Any] = mapped_column("requestParameters", _JSON, nullable=True)

    stats: Mapped[list[Apistats]] = relationship(
        back_populates="apilist", cascade="all, delete-orphan", passive_deletes=True
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "introduce": self.introduce,
            "requestParameters": self.request_parameters,
        }


class Apistats(Base):
    __tablename__ = "apistats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    daily_count: Mapped[int] = mapped_column(Integer)
    total_count: Mapped[int] = mapped_column(Integer)
    apilist_id: Mapped[int] = mapped_column(ForeignKey("apilist.id", ondelete="CASCADE"))

    apilist: Mapped[Apilist] = relationship(back_populates="stats")


class DataCosImage(Base):
    __tablename__ = "data_cos_image"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    url: Mapped[str] = mapped_column(String, unique=True)


class DataCosVideo(Base):
    __tablename__ = "data_cos_video"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    url: Mapped[str] = mapped_column(String, unique=True)


class FriendLink(Base):
    __tablename__ = "friend_links"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True)
    url: Mapped[str] = mapped_column(String, unique=True)
    email: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    icon: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(String)
    is_approved: Mapped[bool] = mapped_column(Boolean)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "email": self.email,
            "icon": self.icon,
            "description": self.description,
            "is_approved": self.is_approved,
        }