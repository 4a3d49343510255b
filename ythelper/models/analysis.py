from pydantic import BaseModel

MAX_TITLES = 5
MAX_TAGS = 30
MAX_THUMBNAILS = 3


class AnalysisResult(BaseModel):
    titles: list[str] = []
    description: str = ""
    tags: list[str] = []
    thumbnails: list[str] = []


class UploadedAsset(BaseModel):
    name: str
    uri: str
    mime_type: str
