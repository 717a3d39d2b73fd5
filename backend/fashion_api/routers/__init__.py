"""
API routers. ``main.create_app`` mounts every router listed in ``ROUTERS``.
"""
from . import ai, auth, chat, clothing, health, outfits, user_data, users, wardrobes, weather

ROUTERS = [
    health.router,
    auth.router,
    users.router,
    wardrobes.router,
    clothing.router,
    outfits.router,
    chat.router,
    weather.router,
    user_data.router,
    ai.router,
]
