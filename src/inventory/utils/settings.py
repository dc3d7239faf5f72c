"""Application settings read from the domain's ``custom`` configuration."""

from protean.utils.globals import current_domain

DEFAULTS = {
    "STOCK_ADJUSTMENT_MAX_ATTEMPTS": 3,
    "DEFAULT_PAGE_SIZE": 10,
    "MAX_PAGE_SIZE": 100,
    "CORS_ORIGINS": ["http://localhost:3000", "http://localhost:3001"],
}


def setting(name: str, domain=None):
    """Return a custom setting, falling back to the built-in default."""
    domain = domain or current_domain
    custom = domain.config.get("custom") or {}
    return custom.get(name, DEFAULTS.get(name))
