from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from tourbus.platform.database.orm_db_setting import Base


class TourSeatingModel(Base):
    __tablename__ = 'tour_seating'

    tour_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    bus_count: Mapped[int] = mapped_column(Integer, nullable=False)
    has_bus_seat_selection: Mapped[bool] = mapped_column(Boolean, nullable=False)
    price_per_person: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
