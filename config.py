# config.py
import os
from dotenv import load_dotenv

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017").strip()
MONGODB_DB = os.getenv("MONGODB_DB", "tutor_desk_db").strip()
CORS_ORIGINS = [
    x.strip()
    for x in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8080").split(",")
    if x.strip()
]
EXPIRY_DAYS_BEFORE = int(os.getenv("EXPIRY_DAYS_BEFORE", "7"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
