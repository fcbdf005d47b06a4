"""API Routers Package.

One router per resource:
- auth.py: register, login, logout
- profile.py: current user profile and password change
- tasks.py: owner-scoped task CRUD and comments
- events.py: shared event CRUD, comments, and the combined /items create
- messages.py: inbox folders, drafts, send, trash
- health.py: /health and /test-db diagnostics

Usage in main.py:
    from api.routers import auth_router, tasks_router, ...

    app.include_router(tasks_router, prefix="/api/tasks", tags=["tasks"])
"""

from .auth import router as auth_router
from .events import items_router
from .events import router as events_router
from .health import router as health_router
from .messages import router as messages_router
from .profile import router as profile_router
from .tasks import router as tasks_router

__all__ = [
    "auth_router",
    "events_router",
    "health_router",
    "items_router",
    "messages_router",
    "profile_router",
    "tasks_router",
]
