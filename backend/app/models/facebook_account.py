"""
Facebook credentials for a project. One row per project; the project id is the
primary key and is always supplied by the caller.
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class FacebookAccount(Base):
    __tablename__ = "facebook_accounts"

    project_id = Column(
        Integer,
        ForeignKey('projects.id', ondelete='CASCADE'),
        primary_key=True,
        autoincrement=False,
    )
    access_token = Column(Text, nullable=False)
    ad_account_id = Column(String(100), nullable=False)  # e.g., "act_123456789"
    page_id = Column(String(100), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="facebook_account")

    def __repr__(self):
        return f"<FacebookAccount(project_id={self.project_id}, ad_account_id={self.ad_account_id})>"
