"""
Datos de demostración - Usuario demo con reseñas, campañas y plantillas.
"""

from datetime import datetime, timedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reviewflow.core.database import transaction
from reviewflow.core.security import generate_api_key
from reviewflow.models import User, SubscriptionPlan, RatingRange
from reviewflow.services import automation_service, campaign_service, review_service, template_service

logger = structlog.get_logger()

DEMO_EMAIL = "demo@reviewflow.com"

SAMPLE_REVIEWS = [
    ("John Davis", 5, "Outstanding service! The team was professional, responsive, and went above and beyond.", 1),
    ("Sarah Martinez", 5, "Great experience from start to finish. The results exceeded my expectations!", 1),
    ("Michael Johnson", 4, "Very satisfied with the service. Quick turnaround and excellent communication.", 2),
    ("Emily Chen", 5, "Absolutely fantastic! Would definitely use again and recommend to friends and family.", 2),
    ("Robert Williams", 3, "Service was okay but took longer than expected. Could improve on communication.", 3),
]

SAMPLE_CAMPAIGNS = [
    (
        "Post-Purchase Review Request", "email", 3,
        "Hi {customer_name}, thank you for your recent purchase! We'd love to hear about your experience.",
    ),
    (
        "Service Completion Follow-up", "email", 1,
        "Hi {customer_name}, thank you for choosing our service! Please share your feedback.",
    ),
]

DEFAULT_TEMPLATES = [
    (
        "Positive Review Response",
        "Thank you so much for taking the time to leave us such a wonderful review! "
        "We truly appreciate your business and look forward to serving you again.",
        RatingRange.HIGH,
    ),
    (
        "Negative Review Response",
        "Thank you for your feedback. We're sorry to hear about your experience. "
        "We'd like to make this right. Please contact us directly so we can address your concerns.",
        RatingRange.LOW,
    ),
]


async def create_demo_user(session: AsyncSession) -> dict:
    """
    Crea el usuario demo si no existe.

    Todo el sembrado es una sola unidad de trabajo: si algo falla no
    queda un usuario demo a medias.

    Returns:
        dict con user_id, api_key y si ya existía
    """
    async with transaction(session):
        result = await session.execute(select(User).where(User.email == DEMO_EMAIL))
        existing = result.scalar_one_or_none()

        if existing:
            return {"message": "Demo user already exists", "user_id": existing.id, "api_key": existing.api_key}

        user = User(
            email=DEMO_EMAIL,
            name="Demo User",
            company_name="Demo Company",
            api_key=generate_api_key(),
            subscription_plan=SubscriptionPlan.PRO
        )
        session.add(user)
        await session.flush()

        now = datetime.utcnow()
        for index, (author, rating, text, days_ago) in enumerate(SAMPLE_REVIEWS, 1):
            await review_service.ingest_review(
                session,
                user.id,
                author_name=author,
                rating=rating,
                review_text=text,
                review_date=now - timedelta(days=days_ago),
                external_id=f"demo_review_{index}"
            )

        for name, text, rating_range in DEFAULT_TEMPLATES:
            await template_service.create_template(
                session, user.id, name=name, template_text=text, rating_range=rating_range, is_default=True
            )

        for name, channel, delay, message in SAMPLE_CAMPAIGNS:
            campaign = await campaign_service.create_campaign(
                session, user.id, name=name, type=channel, message_template=message, send_delay_days=delay
            )
            await campaign_service.add_recipients(
                session, user.id, campaign.id,
                [
                    {"name": "Alice Brown", "email": "alice@example.com"},
                    {"name": "Carlos Ruiz", "phone": "+15550100"},
                ]
            )

        await automation_service.get_settings(session, user.id)

    logger.info("demo_user_created", user_id=user.id)
    return {"message": "Demo user created", "user_id": user.id, "api_key": user.api_key}
