import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Routers
from routers.analysis import router as analysis_router
from routers.marking import router as marking_router
from routers.questions import router as questions_router

logger = logging.getLogger("arith-drill")
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"
CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()
]

app = FastAPI(title="Arithmetic Drill API")

# Allow calls from the web client dev servers
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(questions_router)  # /questions/...
app.include_router(analysis_router)  # /analysis/...
app.include_router(marking_router)  # /mark
logger.info("drill api ready; cors origins: %s", CORS_ALLOW_ORIGINS)
