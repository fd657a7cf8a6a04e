import uvicorn

from feefo_schema.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "feefo_schema.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
    )
