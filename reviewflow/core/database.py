"""
Configuración de la base de datos con SQLAlchemy async.
"""

from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
import structlog

from reviewflow.core.config import settings
from reviewflow.core.exceptions import StorageError

logger = structlog.get_logger()


# Crear engine async
# NullPool es recomendado para aplicaciones async en desarrollo
engine_options = {"echo": settings.debug}
if settings.is_development:
    engine_options["poolclass"] = NullPool

engine = create_async_engine(settings.database_url, **engine_options)

# Session factory
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


# Base para todos los modelos
class Base(DeclarativeBase):
    """Clase base para todos los modelos SQLAlchemy."""
    pass


async def get_db() -> AsyncSession:
    """
    Dependency que provee una sesión de base de datos.
    Usar con: db: AsyncSession = Depends(get_db)
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession):
    """
    Unidad de trabajo: confirma al salir, revierte ante cualquier error.

    Los errores de SQLAlchemy se convierten en StorageError para que la
    capa HTTP los distinga de los errores de validación.

    Anidada dentro de otra unidad de trabajo sobre la misma sesión solo
    hace flush; el commit o rollback lo decide la más externa.
    """
    if session.info.get("unit_of_work"):
        yield session
        await session.flush()
        return

    session.info["unit_of_work"] = True
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("storage_failure", error=str(e))
        raise StorageError("Storage operation failed") from e
    except Exception:
        await session.rollback()
        raise
    finally:
        session.info.pop("unit_of_work", None)


async def init_db():
    """
    Inicializa la base de datos creando todas las tablas.
    Llamar al inicio de la aplicación.
    """
    async with engine.begin() as conn:
        # Importar todos los modelos para que SQLAlchemy los registre
        from reviewflow import models  # noqa

        # Crear tablas (solo en desarrollo, usar Alembic en producción)
        if settings.is_development:
            await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Cierra las conexiones de la base de datos."""
    await engine.dispose()
