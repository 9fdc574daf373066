from sqlalchemy import Column, Integer, String, DateTime, Boolean, Numeric, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Campaign(Base):
    """Local mirror of a campaign created on Meta. Meta stays the source of truth."""
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    fb_campaign_id = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    targeting_json = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    is_daily_budget = Column(Boolean, nullable=False, default=True)
    budget_amount = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    project = relationship("Project", back_populates="campaigns")
    insights = relationship("Insight", back_populates="campaign", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Campaign(id={self.id}, fb_campaign_id={self.fb_campaign_id}, project_id={self.project_id})>"
