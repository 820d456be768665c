# backend/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db

# Routers
from routes.auth import router as auth_router
from routes.admin import router as admin_router
from routes.shifts import router as shifts_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialisation
init_db()

app = FastAPI(title="Shift Tracker API", version="1.0.0")

# CORS Configuration
frontend_url = settings.FRONTEND_URL
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]

if frontend_url:
    origins.append(frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(shifts_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Shift Tracker API is running"}
