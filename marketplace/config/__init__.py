from .settings import Settings, settings
from .loaders import load_currency_registry, load_role_permissions

__all__ = ["Settings", "settings", "load_currency_registry", "load_role_permissions"]
