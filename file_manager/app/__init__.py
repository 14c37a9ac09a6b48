from file_manager.app.app import create_app

__all__ = ["create_app"]
