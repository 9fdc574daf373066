"""
Tests for insight ingestion into the local insights table.
"""
import asyncio
from datetime import date
from decimal import Decimal

import httpx

from app.models import Campaign, Insight
from app.services.insights_sync import sync_project_insights
from conftest import graph_error


def add_campaign(db, project, fb_campaign_id):
    campaign = Campaign(project_id=project.id, fb_campaign_id=fb_campaign_id, name=f"Campaign {fb_campaign_id}")
    db.add(campaign)
    db.commit()
    return campaign


def daily_rows(spend="10.00", installs="4"):
    return {"data": [
        {
            "date_start": "2026-02-01",
            "impressions": "1000",
            "reach": "800",
            "spend": spend,
            "actions": [{"action_type": "mobile_app_install", "value": installs}],
        },
        {"date_start": "2026-02-02", "impressions": "500", "reach": "400", "spend": "5.00"},
    ]}


class TestSyncProjectInsights:
    def test_rows_written_per_campaign_and_day(self, db_session, project, graph):
        campaign = add_campaign(db_session, project, "120330000000001")
        recorder = graph(lambda request: httpx.Response(200, json=daily_rows()))

        summary = asyncio.run(sync_project_insights(db_session, project.id, client=recorder.client()))

        assert summary.campaigns_synced == 1
        assert summary.rows_written == 2
        rows = db_session.query(Insight).order_by(Insight.date).all()
        assert [r.date for r in rows] == [date(2026, 2, 1), date(2026, 2, 2)]
        assert rows[0].campaign_id == campaign.id
        assert rows[0].impressions == 1000
        assert Decimal(rows[0].spend) == Decimal("10.00")
        assert Decimal(rows[0].cpi) == Decimal("2.5")

    def test_repeated_sync_updates_instead_of_duplicating(self, db_session, project, graph):
        add_campaign(db_session, project, "120330000000001")

        asyncio.run(sync_project_insights(
            db_session, project.id, client=graph(lambda request: httpx.Response(200, json=daily_rows())).client()
        ))
        asyncio.run(sync_project_insights(
            db_session, project.id,
            client=graph(lambda request: httpx.Response(200, json=daily_rows(spend="20.00"))).client(),
        ))

        rows = db_session.query(Insight).order_by(Insight.date).all()
        assert len(rows) == 2
        assert Decimal(rows[0].spend) == Decimal("20.00")
        assert Decimal(rows[0].cpi) == Decimal("5")

    def test_failing_campaign_is_skipped(self, db_session, project, graph):
        add_campaign(db_session, project, "bad")
        good = add_campaign(db_session, project, "120330000000002")

        def handler(request):
            if "/bad/" in request.url.path:
                return graph_error("Unsupported get request")
            return httpx.Response(200, json=daily_rows())

        summary = asyncio.run(sync_project_insights(db_session, project.id, client=graph(handler).client()))

        assert summary.skipped_campaigns == ["bad"]
        assert summary.campaigns_synced == 1
        assert {r.campaign_id for r in db_session.query(Insight).all()} == {good.id}

    def test_date_preset_forwarded(self, db_session, project, graph):
        add_campaign(db_session, project, "120330000000001")
        recorder = graph(lambda request: httpx.Response(200, json={"data": []}))

        asyncio.run(sync_project_insights(db_session, project.id, date_preset="yesterday", client=recorder.client()))

        assert recorder.requests[0].url.params["date_preset"] == "yesterday"

    def test_other_projects_untouched(self, db_session, project, graph):
        recorder = graph(lambda request: httpx.Response(200, json=daily_rows()))

        summary = asyncio.run(sync_project_insights(db_session, project.id, client=recorder.client()))

        assert summary.campaigns_synced == 0
        assert recorder.requests == []
