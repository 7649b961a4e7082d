"""Route Dependencies — hand the startup-built gateway to per-request engines.

Invariants:
    - The gateway is built once in the lifespan and stored on app.state
    - Engines are constructed per request with the gateway passed explicitly
"""

from fastapi import Depends, Request

from cattery.core.errors import DatabaseError
from cattery.infrastructure.persistence import PersistenceGateway
from cattery.services.cat_lifecycle import CatLifecycle
from cattery.services.user_lifecycle import UserLifecycle


def get_gateway(request: Request) -> PersistenceGateway:
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise DatabaseError("Gateway not initialized", "connect")
    return gateway


def get_cat_lifecycle(
    gateway: PersistenceGateway = Depends(get_gateway),
) -> CatLifecycle:
    return CatLifecycle(gateway)


def get_user_lifecycle(
    gateway: PersistenceGateway = Depends(get_gateway),
) -> UserLifecycle:
    return UserLifecycle(gateway)
