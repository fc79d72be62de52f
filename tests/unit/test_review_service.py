"""
Tests para el ciclo de vida de las reseñas.
"""

from datetime import datetime, timedelta, timezone

import pytest

from reviewflow.core.config import settings
from reviewflow.core.exceptions import NotFoundError, ValidationFailure
from reviewflow.models import ReviewStatus, RatingRange
from reviewflow.services import analytics_service, review_service, template_service
from reviewflow.services.template_selector import FALLBACK_RESPONSE


@pytest.mark.asyncio
async def test_ingest_defaults(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=4)

    assert review.status == ReviewStatus.PENDING
    assert review.responded is False
    assert review.response_text is None
    assert review.source == settings.default_review_source
    assert review.review_date is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("rating", [0, 6, None, True, "5"])
async def test_ingest_rejects_invalid_rating(session, user, rating):
    with pytest.raises(ValidationFailure) as exc:
        await review_service.ingest_review(session, user.id, author_name="Ana", rating=rating)

    assert exc.value.field == "rating"


@pytest.mark.asyncio
async def test_ingest_requires_author_name(session, user):
    with pytest.raises(ValidationFailure) as exc:
        await review_service.ingest_review(session, user.id, author_name="  ", rating=5)

    assert exc.value.field == "author_name"


@pytest.mark.asyncio
async def test_ingest_rejects_duplicate_external_id(session, user):
    await review_service.ingest_review(session, user.id, author_name="Ana", rating=5, external_id="g-1")

    with pytest.raises(ValidationFailure) as exc:
        await review_service.ingest_review(session, user.id, author_name="Ana", rating=5, external_id="g-1")

    assert exc.value.field == "external_id"


@pytest.mark.asyncio
async def test_respond_sets_response_fields(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=2)

    review = await review_service.respond(session, user.id, review.id, "We are sorry")

    assert review.responded is True
    assert review.status == ReviewStatus.RESPONDED
    assert review.response_text == "We are sorry"
    assert review.response_date is not None


@pytest.mark.asyncio
async def test_respond_requires_text(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=2)

    with pytest.raises(ValidationFailure) as exc:
        await review_service.respond(session, user.id, review.id, "")

    assert exc.value.field == "response_text"
    review = await review_service.get_review(session, user.id, review.id)
    assert review.status == ReviewStatus.PENDING


@pytest.mark.asyncio
async def test_respond_twice_overwrites(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)
    await review_service.respond(session, user.id, review.id, "First")

    review = await review_service.respond(session, user.id, review.id, "Second")

    assert review.response_text == "Second"
    assert review.status == ReviewStatus.RESPONDED


@pytest.mark.asyncio
async def test_respond_after_archive_is_accepted(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=3)
    await review_service.set_status(session, user.id, review.id, ReviewStatus.ARCHIVED)

    review = await review_service.respond(session, user.id, review.id, "Late reply")

    assert review.status == ReviewStatus.RESPONDED
    assert review.responded is True


@pytest.mark.asyncio
async def test_respond_to_other_users_review_is_not_found(session, user, other_user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)

    with pytest.raises(NotFoundError):
        await review_service.respond(session, other_user.id, review.id, "Hijack")


@pytest.mark.asyncio
async def test_auto_respond_uses_bucket_default(session, user):
    await template_service.create_template(
        session, user.id, name="High", template_text="Thanks!", rating_range=RatingRange.HIGH, is_default=True
    )
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)

    text = await review_service.auto_respond(session, user.id, review.id)

    assert text == "Thanks!"
    review = await review_service.get_review(session, user.id, review.id)
    assert review.response_text == "Thanks!"
    assert review.status == ReviewStatus.RESPONDED


@pytest.mark.asyncio
async def test_auto_respond_low_rating_does_not_use_high_template(session, user):
    await template_service.create_template(
        session, user.id, name="High", template_text="Thanks!", rating_range=RatingRange.HIGH, is_default=True
    )
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=2)

    text = await review_service.auto_respond(session, user.id, review.id)

    assert text == FALLBACK_RESPONSE


@pytest.mark.asyncio
async def test_auto_respond_ignores_other_users_templates(session, user, other_user):
    await template_service.create_template(
        session, other_user.id, name="High", template_text="Not yours", rating_range=RatingRange.HIGH, is_default=True
    )
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)

    assert await review_service.auto_respond(session, user.id, review.id) == FALLBACK_RESPONSE


@pytest.mark.asyncio
async def test_set_status_allows_regression(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)
    await review_service.respond(session, user.id, review.id, "Thanks")

    review = await review_service.set_status(session, user.id, review.id, "pending")

    assert review.status == ReviewStatus.PENDING


@pytest.mark.asyncio
async def test_set_status_rejects_unknown_value(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)

    with pytest.raises(ValidationFailure) as exc:
        await review_service.set_status(session, user.id, review.id, "deleted")

    assert exc.value.field == "status"


@pytest.mark.asyncio
async def test_responded_flag_matches_status(session, user):
    first = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)
    second = await review_service.ingest_review(session, user.id, author_name="Luis", rating=1)
    await review_service.respond(session, user.id, first.id, "Thanks")
    await review_service.auto_respond(session, user.id, second.id)
    await review_service.ingest_review(session, user.id, author_name="Eva", rating=3)

    for review in await review_service.list_reviews(session, user.id):
        responded = review.status == ReviewStatus.RESPONDED and review.response_text is not None
        assert review.responded is responded


@pytest.mark.asyncio
async def test_list_reviews_filters_and_orders(session, user, other_user):
    now = datetime.utcnow()
    old = await review_service.ingest_review(
        session, user.id, author_name="Old", rating=4, review_date=now - timedelta(days=3)
    )
    new = await review_service.ingest_review(
        session, user.id, author_name="New", rating=5, review_date=now - timedelta(days=1)
    )
    await review_service.ingest_review(session, other_user.id, author_name="Other", rating=5)
    await review_service.respond(session, user.id, old.id, "Thanks")

    reviews = await review_service.list_reviews(session, user.id)
    assert [r.id for r in reviews] == [new.id, old.id]

    responded = await review_service.list_reviews(session, user.id, status=ReviewStatus.RESPONDED)
    assert [r.id for r in responded] == [old.id]

    page = await review_service.list_reviews(session, user.id, limit=1, offset=1)
    assert [r.id for r in page] == [old.id]


@pytest.mark.asyncio
async def test_delete_review(session, user):
    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5)

    await review_service.delete_review(session, user.id, review.id)

    with pytest.raises(NotFoundError):
        await review_service.get_review(session, user.id, review.id)


@pytest.mark.asyncio
async def test_ingest_stores_aware_date_in_utc(session, user):
    review_date = datetime(2026, 3, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))

    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5, review_date=review_date)

    assert review.review_date == datetime(2026, 4, 1, 4, 0)
    april = await analytics_service.get_monthly_report(session, user.id, month=4, year=2026)
    march = await analytics_service.get_monthly_report(session, user.id, month=3, year=2026)
    assert april["total_reviews"] == 1
    assert march["total_reviews"] == 0


@pytest.mark.asyncio
async def test_ingest_treats_empty_external_id_as_missing(session, user):
    first = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5, external_id="")
    second = await review_service.ingest_review(session, user.id, author_name="Luis", rating=4, external_id="")

    assert first.external_id is None
    assert second.external_id is None


@pytest.mark.asyncio
async def test_external_id_is_scoped_per_user(session, user, other_user):
    await review_service.ingest_review(session, other_user.id, author_name="Ana", rating=5, external_id="g-7")

    review = await review_service.ingest_review(session, user.id, author_name="Ana", rating=5, external_id="g-7")

    assert review.external_id == "g-7"
