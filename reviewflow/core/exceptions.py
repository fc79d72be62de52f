"""
Errores tipados del dominio.

La capa HTTP los traduce a códigos de estado en main.py:
- ValidationFailure -> 400
- NotFoundError     -> 404
- StorageError      -> 503 (reintentable)
"""

from typing import Optional


class ReviewFlowError(Exception):
    """Base para todos los errores del dominio."""

    def __init__(self, message: str, user_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.user_id = user_id


class ValidationFailure(ReviewFlowError):
    """Campo obligatorio ausente o valor fuera del conjunto permitido."""

    def __init__(self, message: str, field: Optional[str] = None, user_id: Optional[str] = None):
        super().__init__(message, user_id=user_id)
        self.field = field


class NotFoundError(ReviewFlowError):
    """
    La entidad no existe o pertenece a otro usuario.
    Ambos casos son indistinguibles para el cliente.
    """

    def __init__(self, resource: str, entity_id: Optional[str] = None, user_id: Optional[str] = None):
        super().__init__(f"{resource} not found", user_id=user_id)
        self.resource = resource
        self.entity_id = entity_id


class StorageError(ReviewFlowError):
    """La base de datos no está disponible o rechazó la operación."""
