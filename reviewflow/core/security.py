"""
Seguridad y autenticación.
Resuelve la credencial bearer al usuario que hace la petición.
"""

from fastapi import HTTPException, Security, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from reviewflow.core.database import get_db


# Header Authorization: Bearer <api_key>
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="API Key del usuario como token bearer"
)


class UserContext:
    """
    Contexto del usuario autenticado.
    Todas las operaciones se limitan a las entidades de este usuario.
    """
    def __init__(self, user_id: str, email: str, name: str):
        self.user_id = user_id
        self.email = email
        self.name = name

    def __repr__(self):
        return f"<UserContext {self.email} ({self.user_id})>"


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> UserContext:
    """
    Valida el token bearer y retorna el contexto del usuario.

    Uso:
        @router.get("/endpoint")
        async def endpoint(user: UserContext = Depends(get_current_user)):
            print(user.user_id)
    """
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token requerido. Incluir header 'Authorization: Bearer <api_key>'",
            headers={"WWW-Authenticate": "Bearer"},
        )

    from reviewflow.models.user import User

    query = select(User).where(User.api_key == credentials.credentials)
    result = await db.execute(query)
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token inválido o usuario no encontrado"
        )

    return UserContext(user_id=user.id, email=user.email, name=user.name)


def generate_api_key() -> str:
    """
    Genera una nueva API key única.
    Formato: rvf_xxxxxxxxxxxxxxxxxxxxxxxxxxxx
    """
    import secrets
    return f"rvf_{secrets.token_hex(24)}"
