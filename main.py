import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlmodel import Session

import database
from config import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD, ALLOWED_ORIGINS, ENVIRONMENT, LOG_LEVEL, PORT
from errors import CRMError
from routers.appointments import router as appointments_router
from routers.auth import router as auth_router
from routers.dashboard import router as dashboard_router
from routers.inquiries import router as inquiries_router
from routers.leads import router as leads_router
from routers.users import router as users_router
from services.profiles import bootstrap_admin


# Configure loguru
logger.remove()
logger.add(
    sys.stderr,
    level=LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables
    database.create_db_and_tables()
    with Session(database.engine) as session:
        admin = bootstrap_admin(session, ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME)
        if admin:
            logger.info("Bootstrapped admin profile {}", admin.email)
    logger.info("Visa CRM API started ({})", ENVIRONMENT)
    yield


app = FastAPI(
    title="Visa CRM Backend API",
    description="Leads, appointments and lead timelines for a visa consultancy",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(CRMError)
async def crm_error_handler(request: Request, exc: CRMError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Root endpoint (no authentication required)
@app.get("/")
def root():
    return JSONResponse(content={"message": "Welcome to the Visa CRM Backend API. For documentation, please refer to /docs."})


app.include_router(inquiries_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(leads_router)
app.include_router(appointments_router)
app.include_router(dashboard_router)


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=PORT, reload=False)
