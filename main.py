from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.database import AsyncSessionLocal, engine, Base
from shared.config.settings import ALLOWED_ORIGINS
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter

# IMPORTANT: import models so they register with Base
from services.catalog_service import models as catalog_models  # noqa: F401
from services.product_service import models as product_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401
from services.user_service import models as user_models  # noqa: F401

from services.catalog_service.router import country_router, type_router
from services.product_service.router import router as product_router
from services.order_service.router import router as order_router
from services.user_service.router import router as user_router
from services.user_service.service import UserService

app = FastAPI(title="Shop Backend", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, "shop_backend")

# --- SECURITY SETUP ---
app.state.limiter = limiter
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
register_exception_handlers(app)

app.include_router(product_router, prefix="/api")
app.include_router(order_router, prefix="/api")
app.include_router(type_router, prefix="/api")
app.include_router(country_router, prefix="/api")
app.include_router(user_router, prefix="/api")


@app.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "shop", "status": "running"}


@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        await UserService.ensure_admin(db)
