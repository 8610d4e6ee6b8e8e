from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Swyft Agent API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    FRONTEND_URL: Optional[str] = None

    FRONTEND_DOMAINS: List[str] = [
        "https://swyftagent.com",
        "https://www.swyftagent.com",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Role-based access control
    # -------------------------------------------------
    # An "admin" level on ANY module grants admin on every module.
    RBAC_ADMIN_GRANT_ESCALATES: bool = Field(
        True,
        description="Treat an admin grant on any module as system-wide admin",
    )

    # Routes missing from the route table are reachable by any authenticated user.
    RBAC_UNMAPPED_ROUTES_ALLOWED: bool = Field(
        True,
        description="Allow routes that are neither mapped nor listed as public",
    )

    # 0 = read the users row fresh on every check
    RBAC_CONTEXT_CACHE_TTL: int = Field(
        0,
        ge=0,
        description="Seconds to cache a loaded RBAC context (0 disables caching)",
    )

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add the deployed frontend URL
if settings.FRONTEND_URL:
    domain = settings.FRONTEND_URL
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add Swyft Agent domains
cors_origins.extend([d.rstrip("/") for d in settings.FRONTEND_DOMAINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
