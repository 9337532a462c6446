import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from budget_api.config import settings
from budget_api.core.database import init_db, AsyncSessionLocal
from budget_api.core.errors import BudgetValidationError, ConflictError
from budget_api.core.logging import setup_logging
from budget_api.core.seed import seed_data
from budget_api.api.router import api_router

logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "Budgets",
        "description": "Monthly budget allocations, spending by category and budget-vs-actual.",
    },
    {
        "name": "Transactions",
        "description": "Transaction listing and category overrides.",
    },
    {
        "name": "Categories",
        "description": "Category catalog and validation.",
    },
    {
        "name": "Net worth",
        "description": "Account balances and manually tracked assets and liabilities.",
    },
    {
        "name": "System",
        "description": "Service endpoints.",
    },
]

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
### API documentation

Personal finance budgeting: category spending aggregation and budget-vs-actual calculation.

    """,
    version=settings.VERSION,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BudgetValidationError)
async def validation_error_handler(request: Request, exc: BudgetValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.on_event("startup")
async def startup():
    setup_logging()
    await init_db()
    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_data(session)

app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/health", tags=["System"])
def health():
    return {
        "status": "operational",
        "version": settings.VERSION
    }
