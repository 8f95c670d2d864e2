"""
Registre central des routers (API v1 + health).
- API v1: payments (payment intents + webhook Stripe), baskets, delivery-methods
- Health: health_router
"""
from fastapi import FastAPI
from ecommerce.payments import views as payments_views
from ecommerce.baskets import views as baskets_views
from ecommerce.delivery import views as delivery_views
from ecommerce.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l’application.
    - L’ordre n’a pas d’impact sauf conflits de chemins (évités par préfixes).
    """
    # API v1
    app.include_router(payments_views.router)
    app.include_router(baskets_views.router)
    app.include_router(delivery_views.router)
    # Health & monitoring
    app.include_router(health_router)
