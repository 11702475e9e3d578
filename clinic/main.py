# clinic/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic.config import get_settings
from clinic.logging_setup import configure_logging
from clinic.services import init_db
from clinic.api.routes import router as api_router


configure_logging()

app = FastAPI(title="Dental Clinic Records API", version="2.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.on_event("startup")
def on_startup() -> None:
    init_db()


@app.get("/")
def root():
    return {"message": "Dental Clinic Records API is running"}


app.include_router(api_router, prefix="/api")
