"""
Selector de plantillas - Elige el texto de respuesta automática.

Política de dos rangos: calificación >= 4 usa "4-5", el resto "1-3".
Nunca falla: sin plantilla aplicable se usa el texto genérico.
"""

from typing import Iterable, Optional

from reviewflow.core.config import settings
from reviewflow.models.enums import RatingRange

FALLBACK_RESPONSE = settings.fallback_response_text


def rating_bucket(rating: int) -> RatingRange:
    """Mapea una calificación a su rango de plantilla."""
    return RatingRange.HIGH if rating >= 4 else RatingRange.LOW


def select_template(rating: int, templates: Iterable) -> Optional[object]:
    """Retorna la plantilla por defecto del rango, o None."""
    bucket = rating_bucket(rating)
    for template in templates:
        if template.is_default and template.rating_range == bucket:
            return template
    return None


def select_response(rating: int, templates: Iterable) -> str:
    """
    Texto de respuesta para una calificación dada.

    Args:
        rating: Calificación de la reseña (1-5)
        templates: Plantillas del usuario (cualquier objeto con
            template_text, rating_range e is_default)

    Returns:
        Texto de la plantilla por defecto del rango, o FALLBACK_RESPONSE
    """
    template = select_template(rating, templates)
    if template is None:
        return FALLBACK_RESPONSE
    return template.template_text
