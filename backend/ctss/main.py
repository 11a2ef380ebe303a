import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import get_logger, get_settings
from .errors import SearchFailedError, ValidationError
from .models import SearchArgs, SearchResponse
from . import clients


settings = get_settings()
logger = get_logger()

# FastAPI setup
app = FastAPI(title="Clinical Tables Search")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _log_upstream():
    logger.info(f"upstream={settings.api_base_url} timeout={settings.request_timeout}s")


# Main search endpoint
@app.post("/search", response_model=SearchResponse)
async def search(req: SearchArgs):
    try:
        async with httpx.AsyncClient(timeout=settings.request_timeout) as session:
            return await clients.search(req.method, req.to_args(), session=session)
    except ValidationError as e:
        # unknown method
        raise HTTPException(status_code=400, detail=str(e))
    except SearchFailedError as e:
        status = 400 if issubclass(e.kind, ValidationError) else 502
        raise HTTPException(status_code=status, detail=str(e))


# Scheme table, for clients building requests
@app.get("/schemes")
def schemes():
    return clients.describe_schemes()


# Health check endpoint
@app.get("/health")
def health():
    return {"status": "ok"}
