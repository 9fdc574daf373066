"""
Tests for ResourceProvisioner: campaign, ad set, creative and ad creation
against a scripted Graph API.
"""
import asyncio
import json
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import httpx
import pytest

from app.services.provisioning import (
    AllCreativesFailedError,
    FallbackPolicy,
    FormatMemory,
    NotFoundError,
    OnUnrecoverable,
    PAYMENT_METHOD_SUBCODE,
    PayloadFormat,
    RemoteRejection,
    ResourceProvisioner,
    TargetingSpec,
    ValidationError,
    is_placeholder,
)
from conftest import form_body, graph_error, is_json, json_body


PLACEHOLDER_AD = re.compile(r"^mock_[a-z0-9_]+_v\d+_\d+$")


def make_provisioner(db, recorder, policy=OnUnrecoverable.PLACEHOLDER, remember_formats=False):
    return ResourceProvisioner(
        db,
        client=recorder.client(),
        policy=FallbackPolicy(policy),
        format_memory=FormatMemory() if remember_formats else None,
    )


def created(resource_id: str) -> httpx.Response:
    return httpx.Response(200, json={"id": resource_id})


def accepts_only(fmt: PayloadFormat, ad_id: str = "120200000000001"):
    """Ad endpoint that only understands one payload shape."""

    def matches(request):
        if is_json(request):
            creative = json_body(request).get("creative")
            if fmt is PayloadFormat.OBJECT_FIELD:
                return isinstance(creative, dict)
            if fmt is PayloadFormat.CREATIVE_FIELD:
                return isinstance(creative, str)
            return False
        body = form_body(request)
        if fmt is PayloadFormat.DIRECT_FIELD:
            return "creative_id" in body
        if fmt is PayloadFormat.FACEBOOK_DOC:
            return "creative" in body
        return False

    def handler(request):
        if matches(request):
            return created(ad_id)
        return graph_error("Invalid parameter")

    return handler


class TestCreateCampaign:
    def test_defaults_special_ad_categories_to_none(self, db_session, project, graph):
        recorder = graph(lambda request: created("120330000000001"))
        provisioner = make_provisioner(db_session, recorder)

        campaign_id = asyncio.run(provisioner.create_campaign(project.id, "Launch", "OUTCOME_TRAFFIC"))

        assert campaign_id == "120330000000001"
        assert len(recorder.requests) == 1
        request = recorder.requests[0]
        assert request.url.path == "/v18.0/act_123456789/campaigns"
        body = form_body(request)
        assert json.loads(body["special_ad_categories"]) == ["NONE"]
        assert body["buying_type"] == "AUCTION"
        assert body["status"] == "PAUSED"
        assert body["is_adset_budget_sharing_enabled"] == "false"
        assert body["access_token"] == "test-token"

    def test_money_and_schedule_fields(self, db_session, project, graph):
        recorder = graph(lambda request: created("120330000000002"))
        provisioner = make_provisioner(db_session, recorder)
        start = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

        asyncio.run(provisioner.create_campaign(
            project.id,
            "Lead push",
            "OUTCOME_LEADS",
            spend_cap=Decimal("150.25"),
            start_time=start,
            buying_type="RESERVED",
        ))

        body = form_body(recorder.requests[0])
        assert body["spend_cap"] == "15025"
        assert body["start_time"] == start.isoformat()
        assert body["buying_type"] == "RESERVED"
        assert "stop_time" not in body

    def test_remote_rejection_carries_user_message(self, db_session, project, graph):
        def handler(request):
            return httpx.Response(400, json={"error": {
                "message": "Invalid parameter",
                "error_user_msg": "Objective is not valid",
                "code": 100,
            }})

        provisioner = make_provisioner(db_session, graph(handler))

        with pytest.raises(RemoteRejection) as exc_info:
            asyncio.run(provisioner.create_campaign(project.id, "Launch", "NOT_AN_OBJECTIVE"))

        assert exc_info.value.message == "Objective is not valid"
        assert exc_info.value.code == 100

    def test_blank_name_rejected_before_remote_call(self, db_session, project, graph):
        recorder = graph(lambda request: created("1"))
        provisioner = make_provisioner(db_session, recorder)

        with pytest.raises(ValidationError):
            asyncio.run(provisioner.create_campaign(project.id, "   ", "OUTCOME_TRAFFIC"))
        assert recorder.requests == []

    def test_unknown_project(self, db_session, graph):
        provisioner = make_provisioner(db_session, graph(lambda request: created("1")))

        with pytest.raises(NotFoundError):
            asyncio.run(provisioner.create_campaign(999, "Launch", "OUTCOME_TRAFFIC"))

    def test_blank_stored_ad_account(self, db_session, project, graph):
        project.facebook_account.ad_account_id = "   "
        db_session.commit()
        recorder = graph(lambda request: created("1"))
        provisioner = make_provisioner(db_session, recorder)

        with pytest.raises(NotFoundError, match="missing credentials"):
            asyncio.run(provisioner.create_campaign(project.id, "Launch", "OUTCOME_TRAFFIC"))
        assert recorder.requests == []


class TestCreateAdSet:
    def test_bid_required_checked_before_other_fields(self, db_session, project, graph):
        recorder = graph(lambda request: created("1"))
        provisioner = make_provisioner(db_session, recorder)

        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(provisioner.create_ad_set(
                project.id,
                campaign_id="",
                name="",
                daily_budget=10,
                optimization_goal="LINK_CLICKS",
                bid_amount=None,
            ))

        assert "bid amount required" in exc_info.value.message
        assert recorder.requests == []

    @pytest.mark.parametrize("goal", ["LINK_CLICKS", "APP_INSTALLS", "LEAD_GENERATION", "CONVERSIONS"])
    def test_bid_required_goals(self, db_session, project, graph, goal):
        provisioner = make_provisioner(db_session, graph(lambda request: created("1")))

        with pytest.raises(ValidationError):
            asyncio.run(provisioner.create_ad_set(
                project.id, campaign_id="120330000000001", name="Set", daily_budget=10, optimization_goal=goal,
            ))

    def test_goal_without_bid_requirement(self, db_session, project, graph):
        recorder = graph(lambda request: created("120340000000001"))
        provisioner = make_provisioner(db_session, recorder)

        ad_set_id = asyncio.run(provisioner.create_ad_set(
            project.id, campaign_id="120330000000001", name="Reach set", daily_budget=10, optimization_goal="REACH",
        ))

        assert ad_set_id == "120340000000001"
        body = form_body(recorder.requests[0])
        assert "bid_amount" not in body
        assert body["bid_strategy"] == "LOWEST_COST_WITHOUT_CAP"

    def test_bid_above_maximum_is_clamped(self, db_session, project, graph):
        recorder = graph(lambda request: created("120340000000002"))
        provisioner = make_provisioner(db_session, recorder)

        asyncio.run(provisioner.create_ad_set(
            project.id,
            campaign_id="120330000000001",
            name="Clicks",
            daily_budget=Decimal("25.50"),
            optimization_goal="LINK_CLICKS",
            bid_amount=5000,
        ))

        body = form_body(recorder.requests[0])
        # 1000 major units, sent in cents
        assert body["bid_amount"] == "100000"
        assert body["daily_budget"] == "2550"
        assert body["bid_strategy"] == "LOWEST_COST_WITH_BID_CAP"
        assert recorder.requests[0].url.path == "/v18.0/act_123456789/adsets"

    def test_schedule_shorter_than_a_day_fails(self, db_session, project, graph):
        recorder = graph(lambda request: created("1"))
        provisioner = make_provisioner(db_session, recorder)
        start = datetime(2026, 3, 1, tzinfo=timezone.utc)

        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(provisioner.create_ad_set(
                project.id,
                campaign_id="120330000000001",
                name="Short",
                daily_budget=10,
                optimization_goal="REACH",
                start_time=start,
                stop_time=start + timedelta(hours=23),
            ))

        assert "24 hours" in exc_info.value.message
        assert recorder.requests == []

    def test_schedule_of_exactly_a_day_passes(self, db_session, project, graph):
        recorder = graph(lambda request: created("120340000000003"))
        provisioner = make_provisioner(db_session, recorder)
        start = datetime(2026, 3, 1, tzinfo=timezone.utc)

        asyncio.run(provisioner.create_ad_set(
            project.id,
            campaign_id="120330000000001",
            name="Day",
            daily_budget=10,
            optimization_goal="REACH",
            start_time=start,
            stop_time=start + timedelta(hours=24),
        ))

        body = form_body(recorder.requests[0])
        assert body["start_time"] == start.isoformat()
        assert body["end_time"] == (start + timedelta(hours=24)).isoformat()

    def test_mixed_naive_and_aware_schedule_is_validated(self, db_session, project, graph):
        recorder = graph(lambda request: created("1"))
        provisioner = make_provisioner(db_session, recorder)

        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(provisioner.create_ad_set(
                project.id,
                campaign_id="120330000000001",
                name="Mixed",
                daily_budget=10,
                optimization_goal="REACH",
                start_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
                stop_time=datetime(2026, 1, 1, 5, 0),
            ))

        assert "24 hours" in exc_info.value.message
        assert recorder.requests == []

    def test_naive_schedule_is_sent_as_utc(self, db_session, project, graph):
        recorder = graph(lambda request: created("120340000000005"))
        provisioner = make_provisioner(db_session, recorder)

        asyncio.run(provisioner.create_ad_set(
            project.id,
            campaign_id="120330000000001",
            name="Naive",
            daily_budget=10,
            optimization_goal="REACH",
            start_time=datetime(2026, 1, 1),
            stop_time=datetime(2026, 1, 3, tzinfo=timezone.utc),
        ))

        body = form_body(recorder.requests[0])
        assert body["start_time"] == "2026-01-01T00:00:00+00:00"
        assert body["end_time"] == "2026-01-03T00:00:00+00:00"

    def test_targeting_sent_without_empty_lists(self, db_session, project, graph):
        recorder = graph(lambda request: created("120340000000004"))
        provisioner = make_provisioner(db_session, recorder)

        asyncio.run(provisioner.create_ad_set(
            project.id,
            campaign_id="120330000000001",
            name="US only",
            daily_budget=10,
            optimization_goal="REACH",
            targeting=TargetingSpec(countries=["US"], age_min=21),
        ))

        targeting = json.loads(form_body(recorder.requests[0])["targeting"])
        assert targeting == {"geo_locations": {"countries": ["US"]}, "age_min": 21, "age_max": 65}

    def test_remote_rejection_propagates(self, db_session, project, graph):
        provisioner = make_provisioner(db_session, graph(lambda request: graph_error("Budget too low")))

        with pytest.raises(RemoteRejection, match="Budget too low"):
            asyncio.run(provisioner.create_ad_set(
                project.id, campaign_id="120330000000001", name="Set", daily_budget=1, optimization_goal="REACH",
            ))


def creative_handler(rejected_videos=(), reject_with_cta=(), thumbnails=None):
    """
    GET /{video_id} answers with a thumbnail (or 404 when missing from
    `thumbnails`); POST /adcreatives creates a creative unless the video is
    rejected outright or only rejected while carrying a call-to-action.
    """
    thumbnails = thumbnails or {}
    counter = iter(range(700000000000001, 700000000001000))

    def handler(request):
        if request.method == "GET":
            video_id = request.url.path.rsplit("/", 1)[-1]
            if video_id in thumbnails:
                return httpx.Response(200, json={"thumbnails": {"data": [{"uri": thumbnails[video_id]}]}})
            return graph_error("Unsupported get request", status_code=404)

        spec = json.loads(form_body(request)["object_story_spec"])
        video_id = spec["video_data"]["video_id"]
        if video_id in rejected_videos:
            return graph_error("Video not ready")
        if video_id in reject_with_cta and "call_to_action" in spec["video_data"]:
            return graph_error("Invalid call to action")
        return created(str(next(counter)))

    return handler


class TestCreateAdCreatives:
    def test_one_creative_per_video(self, db_session, project, graph):
        recorder = graph(creative_handler(thumbnails={"vid_1": "https://cdn.test/vid_1.jpg"}))
        provisioner = make_provisioner(db_session, recorder)

        creative_ids = asyncio.run(provisioner.create_ad_creatives(project.id, "120340000000001", ["vid_1", "vid_2"]))

        assert len(creative_ids) == 2
        assert not any(is_placeholder(c) for c in creative_ids)

        posts = recorder.posts_to("/adcreatives")
        first = json.loads(form_body(posts[0])["object_story_spec"])
        assert first["page_id"] == "page_42"
        assert first["video_data"]["image_url"] == "https://cdn.test/vid_1.jpg"
        assert first["video_data"]["call_to_action"]["type"] == "LEARN_MORE"

        # vid_2 has no thumbnail on Meta, so the default image is used
        second = json.loads(form_body(posts[1])["object_story_spec"])
        assert second["video_data"]["image_url"] == provisioner.default_thumbnail_url

    def test_retries_without_call_to_action(self, db_session, project, graph):
        recorder = graph(creative_handler(reject_with_cta={"vid_1"}))
        provisioner = make_provisioner(db_session, recorder)

        creative_ids = asyncio.run(provisioner.create_ad_creatives(project.id, "120340000000001", ["vid_1"]))

        assert not is_placeholder(creative_ids[0])
        posts = recorder.posts_to("/adcreatives")
        assert len(posts) == 2
        retry = json.loads(form_body(posts[1])["object_story_spec"])
        assert "call_to_action" not in retry["video_data"]
        assert retry["video_data"]["message"] == "Watch our video"

    def test_placeholder_when_both_attempts_fail(self, db_session, project, graph):
        recorder = graph(creative_handler(rejected_videos={"vid_2"}))
        provisioner = make_provisioner(db_session, recorder)

        creative_ids = asyncio.run(
            provisioner.create_ad_creatives(project.id, "120340000000001", ["vid_1", "vid_2", "vid_3"])
        )

        assert len(creative_ids) == 3
        assert not is_placeholder(creative_ids[0])
        assert re.match(r"^mock_creative_\d+_1$", creative_ids[1])
        assert not is_placeholder(creative_ids[2])

    def test_abort_policy_drops_failed_videos(self, db_session, project, graph):
        recorder = graph(creative_handler(rejected_videos={"vid_2"}))
        provisioner = make_provisioner(db_session, recorder, policy=OnUnrecoverable.ABORT)

        creative_ids = asyncio.run(
            provisioner.create_ad_creatives(project.id, "120340000000001", ["vid_1", "vid_2", "vid_3"])
        )

        assert len(creative_ids) == 2
        assert not any(is_placeholder(c) for c in creative_ids)

    def test_abort_policy_all_failed(self, db_session, project, graph):
        provisioner = make_provisioner(
            db_session, graph(creative_handler(rejected_videos={"vid_1"})), policy=OnUnrecoverable.ABORT
        )

        with pytest.raises(AllCreativesFailedError, match="Video not ready"):
            asyncio.run(provisioner.create_ad_creatives(project.id, "120340000000001", ["vid_1"]))

    def test_empty_video_list(self, db_session, project, graph):
        provisioner = make_provisioner(db_session, graph(creative_handler()))

        with pytest.raises(ValidationError):
            asyncio.run(provisioner.create_ad_creatives(project.id, "120340000000001", []))


class TestCreateAds:
    @pytest.mark.parametrize("count", [1, 2, 5])
    def test_one_ad_id_per_creative_when_everything_fails(self, db_session, project, graph, count):
        provisioner = make_provisioner(db_session, graph(lambda request: graph_error("Invalid parameter")))
        creative_ids = [f"70000000000000{i}" for i in range(count)]

        result = asyncio.run(provisioner.create_ads(project.id, "120340000000001", creative_ids))

        assert len(result.ad_ids) == count
        assert all(PLACEHOLDER_AD.match(ad_id) for ad_id in result.ad_ids)
        assert result.error is None

    def test_mixed_outcomes_keep_positions(self, db_session, project, graph):
        def handler(request):
            body = json_body(request) if is_json(request) else form_body(request)
            if "700000000000002" in json.dumps(body):
                return graph_error("Creative is not eligible")
            return created("120200000000009")

        provisioner = make_provisioner(db_session, graph(handler))
        creative_ids = ["700000000000001", "700000000000002", "700000000000003"]

        result = asyncio.run(provisioner.create_ads(project.id, "120340000000001", creative_ids, name_prefix="Spring"))

        assert len(result.ad_ids) == 3
        assert result.ad_ids[0] == "120200000000009"
        assert re.match(r"^mock_spring_v2_\d+$", result.ad_ids[1])
        assert result.ad_ids[2] == "120200000000009"
        assert result.has_placeholders

    def test_object_field_succeeds_on_first_attempt(self, db_session, project, graph):
        recorder = graph(accepts_only(PayloadFormat.OBJECT_FIELD))
        provisioner = make_provisioner(db_session, recorder)

        result = asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["700000000000001"]))

        assert result.ad_ids == ["120200000000001"]
        assert len(recorder.requests) == 1
        request = recorder.requests[0]
        assert request.url.path == "/v18.0/act_123456789/ads"
        assert json_body(request)["creative"] == {"creative_id": "700000000000001"}

    def test_probe_walks_formats_in_order(self, db_session, project, graph):
        recorder = graph(accepts_only(PayloadFormat.FACEBOOK_DOC))
        provisioner = make_provisioner(db_session, recorder)

        result = asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["700000000000001"]))

        assert result.ad_ids == ["120200000000001"]
        assert len(recorder.requests) == 4
        first, second, third, fourth = recorder.requests
        assert is_json(first) and isinstance(json_body(first)["creative"], dict)
        assert form_body(second)["creative_id"] == "700000000000001"
        assert is_json(third) and json_body(third)["creative"] == "700000000000001"
        assert json.loads(form_body(fourth)["creative"]) == {"creative_id": "700000000000001"}

    def test_success_without_id_counts_as_failure(self, db_session, project, graph):
        recorder = graph(lambda request: httpx.Response(200, json={"success": True}))
        provisioner = make_provisioner(db_session, recorder)

        result = asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["700000000000001"]))

        assert len(recorder.requests) == 4
        assert is_placeholder(result.ad_ids[0])

    def test_payment_error_trips_circuit_breaker(self, db_session, project, graph):
        recorder = graph(lambda request: graph_error("No payment method", subcode=PAYMENT_METHOD_SUBCODE))
        provisioner = make_provisioner(db_session, recorder)
        creative_ids = ["700000000000001", "700000000000002", "700000000000003"]

        result = asyncio.run(provisioner.create_ads(project.id, "120340000000001", creative_ids))

        assert len(result.ad_ids) == 3
        assert all(is_placeholder(ad_id) for ad_id in result.ad_ids)
        # only the four format attempts for the first creative went out
        assert len(recorder.requests) == 4
        assert re.match(r"^mock_ad_v3_\d+$", result.ad_ids[2])

    def test_placeholder_creatives_skip_remote_calls(self, db_session, project, graph):
        recorder = graph(lambda request: created("120200000000001"))
        provisioner = make_provisioner(db_session, recorder)

        result = asyncio.run(provisioner.create_ads(
            project.id, "120340000000001", ["700000000000001", "mock_creative_1_1"], name_prefix="Promo",
        ))

        assert recorder.requests == []
        assert len(result.ad_ids) == 2
        assert re.match(r"^mock_promo_v1_\d+$", result.ad_ids[0])
        assert re.match(r"^mock_promo_v2_\d+$", result.ad_ids[1])

    def test_unexpected_failure_returns_single_placeholder(self, db_session, graph):
        recorder = graph(lambda request: created("1"))
        provisioner = make_provisioner(db_session, recorder)

        result = asyncio.run(provisioner.create_ads(999, "120340000000001", ["700000000000001", "700000000000002"]))

        assert len(result.ad_ids) == 1
        assert re.match(r"^mock_ad_error_\d+$", result.ad_ids[0])
        assert "No Facebook account configured" in result.error
        assert recorder.requests == []

    def test_unexpected_failure_uses_name_prefix(self, db_session, graph):
        provisioner = make_provisioner(db_session, graph(lambda request: created("1")))

        result = asyncio.run(provisioner.create_ads(999, "120340000000001", ["700000000000001"], name_prefix="Black Friday"))

        assert re.match(r"^mock_black_friday_\d+$", result.ad_ids[0])

    def test_blank_ad_set_id(self, db_session, project, graph):
        provisioner = make_provisioner(db_session, graph(lambda request: created("1")))

        with pytest.raises(ValidationError):
            asyncio.run(provisioner.create_ads(project.id, "  ", ["700000000000001"]))

    def test_ad_names_follow_prefix(self, db_session, project, graph):
        recorder = graph(accepts_only(PayloadFormat.OBJECT_FIELD))
        provisioner = make_provisioner(db_session, recorder)

        asyncio.run(provisioner.create_ads(
            project.id, "120340000000001", ["700000000000001", "700000000000002"], name_prefix="Spring",
        ))

        assert [json_body(r)["name"] for r in recorder.requests] == ["Spring - Ad 1", "Spring - Ad 2"]

    def test_remembered_format_is_tried_first(self, db_session, project, graph):
        recorder = graph(accepts_only(PayloadFormat.DIRECT_FIELD))
        provisioner = make_provisioner(db_session, recorder, remember_formats=True)

        asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["700000000000001", "700000000000002"]))

        # first creative: ObjectField then DirectField; second: DirectField straight away
        assert len(recorder.requests) == 3

    def test_without_memory_every_creative_reprobes(self, db_session, project, graph):
        recorder = graph(accepts_only(PayloadFormat.DIRECT_FIELD))
        provisioner = make_provisioner(db_session, recorder)

        asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["700000000000001", "700000000000002"]))

        assert len(recorder.requests) == 4


class TestCreateAdsAbortPolicy:
    def test_circuit_breaker_raises(self, db_session, project, graph):
        recorder = graph(lambda request: graph_error("No payment method", subcode=PAYMENT_METHOD_SUBCODE))
        provisioner = make_provisioner(db_session, recorder, policy=OnUnrecoverable.ABORT)

        with pytest.raises(RemoteRejection) as exc_info:
            asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["700000000000001", "700000000000002"]))

        assert exc_info.value.subcode == PAYMENT_METHOD_SUBCODE
        assert len(recorder.requests) == 4

    def test_exhausted_formats_raise(self, db_session, project, graph):
        provisioner = make_provisioner(
            db_session, graph(lambda request: graph_error("Invalid parameter")), policy=OnUnrecoverable.ABORT
        )

        with pytest.raises(RemoteRejection, match="Invalid parameter"):
            asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["700000000000001"]))

    def test_placeholder_creatives_rejected(self, db_session, project, graph):
        provisioner = make_provisioner(db_session, graph(lambda request: created("1")), policy=OnUnrecoverable.ABORT)

        with pytest.raises(ValidationError):
            asyncio.run(provisioner.create_ads(project.id, "120340000000001", ["mock_creative_1_0"]))

    def test_unexpected_failure_propagates(self, db_session, graph):
        provisioner = make_provisioner(db_session, graph(lambda request: created("1")), policy=OnUnrecoverable.ABORT)

        with pytest.raises(NotFoundError):
            asyncio.run(provisioner.create_ads(999, "120340000000001", ["700000000000001"]))


class TestFormatDiagnostics:
    def test_single_format(self, db_session, project, graph):
        recorder = graph(accepts_only(PayloadFormat.CREATIVE_FIELD))
        provisioner = make_provisioner(db_session, recorder)

        result = asyncio.run(provisioner.test_ad_format(
            project.id, "120340000000001", "700000000000001", PayloadFormat.CREATIVE_FIELD, "Probe",
        ))

        assert result.success
        assert result.resource_id == "120200000000001"
        assert json_body(recorder.requests[0])["name"] == "Probe"

    def test_all_formats_run_in_declaration_order(self, db_session, project, graph):
        recorder = graph(accepts_only(PayloadFormat.OBJECT_FIELD))
        provisioner = make_provisioner(db_session, recorder)

        results = asyncio.run(provisioner.test_all_ad_formats(project.id, "120340000000001", "700000000000001"))

        assert list(results) == list(PayloadFormat)
        assert [r.success for r in results.values()] == [False, True, False, False]
        assert results[PayloadFormat.DIRECT_FIELD].error.message == "Invalid parameter"
        assert len(recorder.requests) == 4
