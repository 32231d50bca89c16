# app/api/__init__.py
from fastapi import FastAPI
from app.api.routers import admin, cart, catalog, checkout, health, orders, products


def include_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(catalog.router)
    app.include_router(cart.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(admin.router)
