import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ythelper.config import get_settings
from ythelper.exceptions import ClientInputError, ConfigurationError, ProcessingError
from ythelper.routers.analyze import router as analyze_router
from ythelper.routers.ui import router as ui_router

logger = logging.getLogger(__name__)


# --- FastAPI app ---

app = FastAPI(title="YouTube Helper", version="0.1.0")
app.include_router(analyze_router)
app.include_router(ui_router)


# --- Exception handlers ---

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(ClientInputError)
async def client_input_error_handler(request: Request, exc: ClientInputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(ProcessingError)
async def processing_error_handler(request: Request, exc: ProcessingError):
    logger.warning("Analysis failed: %s", exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error while handling %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "Analysis failed."})


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "ythelper.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
