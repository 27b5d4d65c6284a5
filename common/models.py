from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlmodel import Field, SQLModel


class NotificationPattern(SQLModel, table=True):
    __tablename__ = "notification_patterns"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )

    name: str = Field(sa_column=Column(String(128), nullable=False))

    # two-letter country code or "ALL"
    country: str = Field(
        default="ALL",
        sa_column=Column(String(8), nullable=False, server_default="ALL", index=True),
    )

    # yape / plin / tigo_money / ...; NULL matches any wallet filter-less lookup
    wallet_type: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))

    pattern: str = Field(sa_column=Column(Text, nullable=False))
    regex_flags: Optional[str] = Field(default="i", sa_column=Column(String(8), nullable=True))

    # 1-based regex group indices, sender_group 0 = no sender capture
    amount_group: int = Field(default=1, sa_column=Column(Integer, nullable=False, server_default="1"))
    sender_group: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default="0"))

    priority: int = Field(default=100, sa_column=Column(Integer, nullable=False, server_default="100", index=True))

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, server_default="true"),
    )

    currency: Optional[str] = Field(default=None, sa_column=Column(String(3), nullable=True))

    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False),
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False),
    )

    def __repr__(self) -> str:
        return (
            f"NotificationPattern(id={self.id}, name={self.name!r}, country={self.country!r}, "
            f"wallet_type={self.wallet_type!r}, priority={self.priority}, is_active={self.is_active})"
        )


class NotificationParsingLog(SQLModel, table=True):
    __tablename__ = "notification_parsing_logs"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )

    notification_text: str = Field(sa_column=Column(Text, nullable=False))
    country: Optional[str] = Field(default=None, sa_column=Column(String(8), nullable=True, index=True))

    pattern_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("notification_patterns.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )

    success: bool = Field(sa_column=Column(Boolean, nullable=False))

    extracted_amount: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 2), nullable=True))
    extracted_sender: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    extracted_source: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))

    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True),
    )

    def __repr__(self) -> str:
        return (
            f"NotificationParsingLog(id={self.id}, country={self.country!r}, pattern_id={self.pattern_id}, "
            f"success={self.success}, extracted_amount={self.extracted_amount})"
        )
