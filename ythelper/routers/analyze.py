from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from ythelper.config import Settings, get_settings
from ythelper.exceptions import ClientInputError
from ythelper.models.analysis import AnalysisResult
from ythelper.models.common import BackendStatus, ErrorResponse, StatusResponse
from ythelper.services import analyzer
from ythelper.services import gemini as gemini_service
from ythelper.services.backend import AnalysisBackend

router = APIRouter(prefix="/api", tags=["analyze"])


@router.post(
    "/analyze",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(
    request: Request,
    settings: Settings = Depends(get_settings),
    backend: AnalysisBackend = Depends(gemini_service.get_backend),
) -> AnalysisResult:
    """Analyze a multipart upload with fields ``video``, ``images`` and ``context``."""
    async with request.form() as form:
        video = form.get("video")
        if not isinstance(video, UploadFile):
            raise ClientInputError("Video file is required.")
        images = [
            item for item in form.getlist("images")
            if isinstance(item, UploadFile) and item.filename
        ]
        context = form.get("context")
        context = context.strip() if isinstance(context, str) else ""
        return await analyzer.analyze_upload(video, images, context, backend, settings)


@router.get("/status")
def api_status(settings: Settings = Depends(get_settings)) -> StatusResponse:
    return StatusResponse(
        gemini=BackendStatus(
            configured=bool(settings.gemini_api_key),
            model=settings.gemini_model,
        )
    )
