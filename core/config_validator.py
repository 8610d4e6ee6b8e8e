# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    # Required for RBAC context lookups and token validation
    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional configuration and risky RBAC policy switches.
    Returns list of warnings.
    """
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")

    if settings.RBAC_ADMIN_GRANT_ESCALATES:
        warnings.append(
            "RBAC_ADMIN_GRANT_ESCALATES is on: an admin grant on any module is system-wide admin"
        )

    if settings.RBAC_UNMAPPED_ROUTES_ALLOWED:
        warnings.append(
            "RBAC_UNMAPPED_ROUTES_ALLOWED is on: routes missing from the route table are open"
        )

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError if critical config is missing in production.
    Logs warnings for optional config.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.ENV == "production":
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        logger.warning(error_msg)

    for warning in missing_optional:
        logger.warning(f"Configuration warning: {warning}")

    logger.info("Configuration validation passed")
