"""
Tests para las plantillas y la unicidad de la plantilla por defecto.
"""

import pytest

from reviewflow.core.exceptions import NotFoundError, ValidationFailure
from reviewflow.models import RatingRange
from reviewflow.services import template_service


async def _defaults(session, user_id):
    templates = await template_service.list_templates(session, user_id)
    return {t.id for t in templates if t.is_default}


@pytest.mark.asyncio
async def test_new_default_demotes_previous_in_same_range(session, user):
    first = await template_service.create_template(
        session, user.id, name="Low 1", template_text="Sorry", rating_range=RatingRange.LOW, is_default=True
    )
    high = await template_service.create_template(
        session, user.id, name="High", template_text="Thanks", rating_range=RatingRange.HIGH, is_default=True
    )

    second = await template_service.create_template(
        session, user.id, name="Low 2", template_text="Apologies", rating_range=RatingRange.LOW, is_default=True
    )

    await session.refresh(first)
    assert first.is_default is False
    assert await _defaults(session, user.id) == {high.id, second.id}


@pytest.mark.asyncio
async def test_demotion_does_not_touch_other_users(session, user, other_user):
    theirs = await template_service.create_template(
        session, other_user.id, name="Low", template_text="Sorry", rating_range=RatingRange.LOW, is_default=True
    )

    await template_service.create_template(
        session, user.id, name="Low", template_text="Sorry", rating_range=RatingRange.LOW, is_default=True
    )

    assert await _defaults(session, other_user.id) == {theirs.id}


@pytest.mark.asyncio
async def test_enforce_single_default_returns_demoted_count(session, user):
    await template_service.create_template(
        session, user.id, name="Low", template_text="Sorry", rating_range=RatingRange.LOW, is_default=True
    )

    demoted = await template_service.enforce_single_default(session, user.id, RatingRange.LOW)
    await session.commit()

    assert demoted == 1
    assert await _defaults(session, user.id) == set()


@pytest.mark.asyncio
async def test_update_to_default_demotes_previous(session, user):
    first = await template_service.create_template(
        session, user.id, name="High 1", template_text="Thanks", rating_range=RatingRange.HIGH, is_default=True
    )
    second = await template_service.create_template(
        session, user.id, name="High 2", template_text="Great", rating_range=RatingRange.HIGH
    )

    await template_service.update_template(session, user.id, second.id, is_default=True)

    assert await _defaults(session, user.id) == {second.id}
    await session.refresh(first)
    assert first.is_default is False


@pytest.mark.asyncio
async def test_moving_default_to_other_range_demotes_there(session, user):
    low = await template_service.create_template(
        session, user.id, name="Low", template_text="Sorry", rating_range=RatingRange.LOW, is_default=True
    )
    high = await template_service.create_template(
        session, user.id, name="High", template_text="Thanks", rating_range=RatingRange.HIGH, is_default=True
    )

    await template_service.update_template(session, user.id, low.id, rating_range=RatingRange.HIGH)

    assert await _defaults(session, user.id) == {low.id}
    await session.refresh(high)
    assert high.is_default is False


@pytest.mark.asyncio
async def test_partial_update_keeps_default_flag(session, user):
    template = await template_service.create_template(
        session, user.id, name="High", template_text="Thanks", rating_range=RatingRange.HIGH, is_default=True
    )

    template = await template_service.update_template(session, user.id, template.id, name="Renamed")

    assert template.name == "Renamed"
    assert template.is_default is True


@pytest.mark.asyncio
async def test_create_requires_text(session, user):
    with pytest.raises(ValidationFailure) as exc:
        await template_service.create_template(session, user.id, name="Empty", template_text=" ")

    assert exc.value.field == "template_text"


@pytest.mark.asyncio
async def test_delete_other_users_template_is_not_found(session, user, other_user):
    template = await template_service.create_template(session, user.id, name="Mine", template_text="Thanks")

    with pytest.raises(NotFoundError):
        await template_service.delete_template(session, other_user.id, template.id)
