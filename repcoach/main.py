from fastapi import FastAPI

from repcoach.routes.health_route import router as health_router
from repcoach.routes.session_route import router as session_router

app = FastAPI(
    title="repcoach",
    version="1.0.0"
)

# Register endpoints
app.include_router(health_router, tags=["health"])
app.include_router(session_router, tags=["sessions"])
