# Group roster booking backend entrypoint.

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from grouproster.app.api import booking
from grouproster.app.api import invites
from grouproster.app.api import manage
from grouproster.app.api import members
from grouproster.app.core.logging_config import configure_logging
from grouproster.app.core.settings import get_settings
from grouproster.app.db.base import Base
from grouproster.app.db.session import engine

app = FastAPI()
settings = get_settings()

origins = [
    settings.base_url,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(booking.router)
app.include_router(invites.router)
app.include_router(members.router)
app.include_router(manage.router)


@app.exception_handler(RequestValidationError)
async def invalid_input_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": jsonable_encoder(exc.errors())},
    )


@app.get("/")
def read_root():
    return {"app": "Group Roster backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_runtime():
    configure_logging()
    Base.metadata.create_all(bind=engine)


@app.on_event("shutdown")
def release_connections():
    engine.dispose()
