"""Configuration package for shoplist."""
from .settings import get_settings, clear_settings_cache, ShopListSettings

__all__ = ['get_settings', 'clear_settings_cache', 'ShopListSettings']
