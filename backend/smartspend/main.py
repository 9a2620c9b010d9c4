import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import CORS_ORIGINS, LOG_LEVEL, validate_env
from .database import init_db
from .routers import actions, auth, dashboard, insights, transactions

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_env()
    logger.info("🚀 Server starting... checking tables.")
    await init_db()
    yield
    logger.info("🛑 Server shutting down.")

app = FastAPI(title="SmartSpend API", lifespan=lifespan)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register Routers
app.include_router(auth.router)
app.include_router(transactions.router)
app.include_router(dashboard.router)
app.include_router(insights.router)
app.include_router(actions.router)

@app.get("/")
def read_root():
    return {"status": "✅ API is running"}
