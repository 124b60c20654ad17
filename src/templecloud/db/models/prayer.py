"""Per-temple prayer service and donation settings for the online prayer form."""

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from templecloud.db.base import Base, TimestampMixin


class TemplePrayerServiceRow(Base, TimestampMixin):
    __tablename__ = "temple_prayer_services"

    setting_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    temple_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("temples.temple_id", ondelete="CASCADE"), nullable=False, index=True
    )
    # taisui | guangming | wenchang | baidou | yuelao
    service_code: Mapped[str] = mapped_column(String(32), nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    custom_price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    annual_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("temple_id", "service_code", name="uq_temple_prayer_service"),
    )


class TempleDonationSettingsRow(Base, TimestampMixin):
    __tablename__ = "temple_donation_settings"

    temple_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("temples.temple_id", ondelete="CASCADE"), primary_key=True
    )
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    min_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    suggested_amounts: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    allow_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    custom_message: Mapped[str | None] = mapped_column(Text, nullable=True)
