from ghost_engine.config_resolution.resolver import ConfigResolver

__all__ = ["ConfigResolver"]
