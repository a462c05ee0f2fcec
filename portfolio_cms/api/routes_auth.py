"""
Routes d'authentification pour l'API.

Ce module fournit l'inscription et la connexion des administrateurs, ainsi que la dépendance
`get_current_user` qui protège toutes les écritures du CMS (jeton bearer obligatoire; la clé
anonyme publique ne donne accès qu'en lecture).
"""

import uuid

import structlog
from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr

from portfolio_cms.apigw.errors import unauthorized
from portfolio_cms.core.container import container
from portfolio_cms.core.http_constants import HTTP_CONFLICT
from portfolio_cms.domain.auth import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

router = APIRouter(prefix="/auth", tags=["auth"])
log = structlog.get_logger(__name__).bind(component="auth")


class SignupPayload(BaseModel):
    """Payload pour l'inscription d'un nouvel administrateur."""

    email: EmailStr
    password: str
    name: str | None = None


class SigninPayload(BaseModel):
    """Payload pour la connexion d'un administrateur."""

    email: EmailStr
    password: str


def _public_user(user: dict) -> dict:
    return {"id": user["id"], "email": user["email"], "name": user.get("name")}


@router.post("/signup")
def signup(p: SignupPayload):
    """Inscrit un administrateur; 409 `email_exists` si l'email est déjà utilisé."""
    if container.user_repo.get_by_email(str(p.email)):
        log.info("signup_conflict", email=str(p.email))
        return JSONResponse(
            status_code=HTTP_CONFLICT,
            content={
                "error": "A user with this email address has already been registered",
                "code": "email_exists",
                "user_exists": True,
            },
        )
    user = {
        "id": uuid.uuid4().hex,
        "email": str(p.email),
        "name": p.name,
        "password_hash": hash_password(p.password),
    }
    container.user_repo.save(user)
    log.info("user_created", user_id=user["id"])
    return {"user": _public_user(user)}


@router.post("/signin")
def signin(p: SigninPayload):
    """Authentifie un administrateur et retourne une session (jeton d'accès)."""
    user = container.user_repo.get_by_email(str(p.email))
    if not user or not verify_password(p.password, user.get("password_hash", "")):
        raise unauthorized("invalid_credentials")
    settings = container.settings
    token = create_access_token(
        secret=settings.JWT_SECRET,
        alg=settings.JWT_ALG,
        expires_min=settings.JWT_EXPIRES_MIN,
        payload={"sub": user["id"], "email": user["email"], "name": user.get("name")},
    )
    return {
        "session": {
            "access_token": token,
            "token_type": "bearer",
            "expires_in": settings.JWT_EXPIRES_MIN * 60,
        },
        "user": _public_user(user),
    }


def get_current_user(authorization: str = Header(None)):
    """Extrait et valide l'administrateur courant à partir du jeton bearer."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise unauthorized("missing_token")
    token = authorization.split(" ", 1)[1].strip()
    if token == container.settings.PUBLIC_ANON_KEY:
        raise unauthorized("anonymous_key_is_read_only")
    data = decode_token(token, container.settings.JWT_SECRET, container.settings.JWT_ALG)
    if not data:
        raise unauthorized("invalid_token")
    user = container.user_repo.get_by_email(str(data.email))
    if not user:
        raise unauthorized("user_not_found")
    return user
