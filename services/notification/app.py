import logging
import os
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI

from consumer import start_consumer

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    threading.Thread(target=start_consumer, daemon=True).start()
    yield


app = FastAPI(title="Notification Service", lifespan=lifespan)


@app.get("/health")
def health():
    return {"ok": True}
