"""
API dependencies for authentication and service wiring.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.ai.openai_adapter import content_ai_service
from core.interfaces.services import ContentGenerationClient
from core.security.tokens import TokenService
from infrastructure.config.settings import settings
from infrastructure.database.connection import get_db
from infrastructure.database.models.user import User
from services import get_cost_estimator
from services.bulk_generation import BulkGenerationService
from services.content_generation import ContentGenerationPipeline, GenerationContext
from services.content_store import ContentStore

token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
)


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user.

    Tokens are issued by the auth service; this only verifies the Bearer
    token and loads the matching account.
    """
    token = None
    if authorization and authorization.startswith("Bearer "):
        parts = authorization.split(" ", 1)
        token = parts[1] if len(parts) > 1 and parts[1] else None

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = token_service.verify_access_token(token)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(select(User).where(User.id == payload.sub))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is not active",
        )

    return user


def get_ai_service() -> ContentGenerationClient:
    return content_ai_service


def get_content_store(db: AsyncSession = Depends(get_db)) -> ContentStore:
    return ContentStore(db, slug_max_attempts=settings.slug_max_attempts)


def get_generation_pipeline(
    db: AsyncSession = Depends(get_db),
    ai_service: ContentGenerationClient = Depends(get_ai_service),
) -> ContentGenerationPipeline:
    return ContentGenerationPipeline(
        db=db,
        ai_service=ai_service,
        cost_estimator=get_cost_estimator(),
        context=GenerationContext.from_settings(settings),
    )


def get_bulk_service(
    db: AsyncSession = Depends(get_db),
    pipeline: ContentGenerationPipeline = Depends(get_generation_pipeline),
) -> BulkGenerationService:
    return BulkGenerationService(db=db, pipeline=pipeline)
