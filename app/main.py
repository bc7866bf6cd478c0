from fastapi import FastAPI
from app.core.logging_config import configure_logging
from app.api.v1.routes.settlements import router as settlements_router

configure_logging()

app = FastAPI(
    title="Trip Settlement Service",
    description="Computes balances and settlement transfers for shared trip expenses",
    version="1.0.0"
)

app.include_router(settlements_router)

@app.get("/")
def read_root():
    return {"message": "Trip Settlement Service API", "version": "1.0.0"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
