from inventory.config.settings import settings

__all__ = ["settings"]
