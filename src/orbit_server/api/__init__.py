from orbit_server.api.router import router

__all__ = ["router"]
