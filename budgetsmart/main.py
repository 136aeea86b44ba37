import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from budgetsmart.presentation.budgets_api import router as budgets_router
from budgetsmart.presentation.categories_api import router as categories_router
from budgetsmart.presentation.dashboard_api import router as dashboard_router
from budgetsmart.presentation.reports_api import router as reports_router
from budgetsmart.presentation.transactions_api import router as transactions_router
from budgetsmart.presentation.user_api import router as users_router

load_dotenv()  # Load environment variables from .env

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="BudgetSmart API", version="1.0.0")

cors_origins = os.getenv("CORS_ORIGINS", "")
origins = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_router)
app.include_router(categories_router)
app.include_router(transactions_router)
app.include_router(budgets_router)
app.include_router(dashboard_router)
app.include_router(reports_router)
