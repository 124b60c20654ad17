"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from templecloud.db.models.temple import TempleRow
from templecloud.db.models.membership import TempleMemberRow
from templecloud.db.models.page import TemplePageRow
from templecloud.db.models.event import EventRow
from templecloud.db.models.service import TempleServiceRow
from templecloud.db.models.prayer import TempleDonationSettingsRow, TemplePrayerServiceRow

__all__ = [
    "TempleRow",
    "TempleMemberRow",
    "TemplePageRow",
    "EventRow",
    "TempleServiceRow",
    "TemplePrayerServiceRow",
    "TempleDonationSettingsRow",
]
