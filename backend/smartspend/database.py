from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import DATABASE_URL

# SQLite needs cross-thread access under the async driver
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create Async Engine
engine = create_async_engine(DATABASE_URL, echo=False, future=True, connect_args=connect_args)

# Create Async Session Factory
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()

# Dependency for Routes
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session

# Helper to create tables (Run this once on startup)
async def init_db(bind=None):
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
