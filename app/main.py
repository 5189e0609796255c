import logging
from fastapi import FastAPI
from app.api.router import api_router
from app.config import settings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.verbose else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="Shopify City Deals Sync")

app.include_router(api_router)

@app.get("/")
def root():
    return {"status": "running", "message": "Shopify City Deals Sync"}
