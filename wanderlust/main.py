from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wanderlust.api.routes import bookings, bot, chat, listings, reviews
from wanderlust.core.config import get_settings
from wanderlust.core.errors import register_exception_handlers
from wanderlust.services.retention import start_retention_sweeper, stop_retention_sweeper

settings = get_settings()

app = FastAPI(title=settings.app_name)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Update this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.api_route("/ping", methods=["GET", "HEAD", "OPTIONS"], tags=["public"])
async def ping() -> dict[str, str]:
    return {"status": "ok"}


# Include routers: listing domain
app.include_router(listings.router)
app.include_router(reviews.router)
app.include_router(bookings.router)
app.include_router(chat.router)

# Include routers: recommendation bot
app.include_router(bot.router)


@app.on_event("startup")
async def _startup_retention() -> None:
    await start_retention_sweeper()


@app.on_event("shutdown")
async def _shutdown_retention() -> None:
    await stop_retention_sweeper()


@app.get("/", tags=["public"])
async def root() -> dict[str, str]:
    return {"message": f"Welcome to {settings.app_name}"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
