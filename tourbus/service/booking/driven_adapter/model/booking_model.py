from datetime import date, datetime
from typing import Optional

from sqlalchemy import ARRAY, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tourbus.platform.database.orm_db_setting import Base


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    tour_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    bus_id: Mapped[str] = mapped_column(String(8), nullable=False)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    selected_seats: Mapped[list] = mapped_column(ARRAY(String), nullable=False, default=list)
    persons: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(64), nullable=False)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payment_proof_file: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    from_location: Mapped[str] = mapped_column(String(255), nullable=False)
    to_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    travel_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    decided_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
