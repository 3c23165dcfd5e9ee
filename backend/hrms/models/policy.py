from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Text, Boolean, ForeignKey, DateTime, text
from typing import Optional
from .authz import Base


class CompanyPolicy(Base):
    __tablename__ = 'company_policies'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Unset company means the policy is shared by every tenant
    company_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey('companies.id'), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, default='general')
    content: Mapped[str] = mapped_column(Text, nullable=False, default='')
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))
