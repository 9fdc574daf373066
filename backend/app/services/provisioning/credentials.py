"""
Per-project credential lookup.
"""
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.models import FacebookAccount
from app.utils import normalize_act
from app.services.provisioning.errors import NotFoundError


@dataclass(frozen=True)
class Credentials:
    access_token: str
    ad_account_id: str   # always "act_<digits>"
    page_id: str


class CredentialResolver:
    """Reads the FacebookAccount row for a project. No caching."""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, project_id: int) -> Credentials:
        account = self.db.query(FacebookAccount).filter(
            FacebookAccount.project_id == project_id,
        ).first()
        if not account:
            raise NotFoundError(f"No Facebook account configured for project {project_id}")
        fields = (account.access_token, account.ad_account_id, account.page_id)
        if not all(str(value or "").strip() for value in fields):
            raise NotFoundError(f"Facebook account for project {project_id} is missing credentials")

        return Credentials(
            access_token=account.access_token,
            ad_account_id=normalize_act(account.ad_account_id),
            page_id=str(account.page_id),
        )
