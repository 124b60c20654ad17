"""Temple services (lamps, talismans, blessings) offered on the public page."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from templecloud.db.base import Base, TimestampMixin


class TempleServiceRow(Base, TimestampMixin):
    __tablename__ = "temple_services"

    service_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    temple_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("temples.temple_id", ondelete="CASCADE"), nullable=False, index=True
    )
    icon: Mapped[str | None] = mapped_column(String(16), nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # year | month | time | piece
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="time")
    is_popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
