from contextlib import asynccontextmanager
from fastapi import FastAPI
from ..logger import get_logger
import asyncio

logger = get_logger(__name__)

SHUTDOWN_TIMEOUT = 5.0

async def startup_event(app: FastAPI):
    """Open the score store before the first request"""
    try:
        await app.state.store.initialize()
        logger.info(f"Score store initialized ({type(app.state.store).__name__})")
    except Exception as e:
        logger.error(f"Failed to initialize score store: {e}")
        raise

async def shutdown_event(app: FastAPI):
    """Close the score store"""
    try:
        # Set a timeout for the shutdown process
        async with asyncio.timeout(SHUTDOWN_TIMEOUT):
            await app.state.store.close()
            logger.info("Score store closed")
    except asyncio.TimeoutError:
        logger.warning("Shutdown timed out, abandoning open store connections")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_event(app)
    try:
        yield
    finally:
        await shutdown_event(app)
