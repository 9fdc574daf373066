from app.models.project import Project
from app.models.facebook_account import FacebookAccount
from app.models.campaign import Campaign
from app.models.video import Video
from app.models.insight import Insight

__all__ = [
    "Project",
    "FacebookAccount",
    "Campaign",
    "Video",
    "Insight",
]
