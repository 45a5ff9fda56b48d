# main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, LOG_LEVEL
from database import db
from routes import students
from services.student_store import StudentStore

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


async def init_db():
    await StudentStore(db).ensure_indexes()
    logger.info("Student indexes ensured")

app = FastAPI(title="Tutor Desk API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(students.router)


@app.on_event("startup")
async def startup_event():
    await init_db()


@app.get("/health")
async def health():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
