from submittal_api.api.routes.packets import build_packets_router

__all__ = ["build_packets_router"]
