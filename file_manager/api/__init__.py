from file_manager.api.api import api

__all__ = ["api"]
