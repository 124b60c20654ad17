"""Temple membership table linking an identity-provider user to a temple."""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from templecloud.db.base import Base, TimestampMixin


class TempleMemberRow(Base, TimestampMixin):
    __tablename__ = "temple_members"

    member_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    temple_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("temples.temple_id", ondelete="CASCADE"), nullable=False, index=True
    )
    auth_user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (
        UniqueConstraint("temple_id", "auth_user_id", name="uq_temple_member"),
    )
