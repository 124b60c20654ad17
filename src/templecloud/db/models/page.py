"""Public page configuration, one row per temple."""

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from templecloud.db.base import Base, TimestampMixin


class TemplePageRow(Base, TimestampMixin):
    __tablename__ = "temple_pages"

    page_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    temple_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("temples.temple_id", ondelete="CASCADE"), nullable=False, unique=True
    )
    theme: Mapped[str] = mapped_column(String(50), nullable=False, default="default")
    blocks: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
