from fastapi import FastAPI
from dme_orders.core.app_config import LOG_JSON, LOG_LEVEL
from dme_orders.core.logging_config import setup_logging
from dme_orders.api.routes_notes import router as notes_router

setup_logging(LOG_LEVEL, format_json=LOG_JSON)

app = FastAPI(title="DME Order Extraction Service", version="1.0")

app.include_router(notes_router)

@app.get("/health")
def health():
    return {"ok": True}
@app.get("/")
def root():
    return {"ok": True, "service": "DME Order Extraction Service"}


def run(host: str = "0.0.0.0", port: int = 8000) -> None:
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
