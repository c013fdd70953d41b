from pydantic import BaseModel


class ImportResult(BaseModel):
    message: str
    created: int
    updated: int
    skipped: int


class BackupImportResult(BaseModel):
    message: str
    restored: dict[str, int]


class ClearResult(BaseModel):
    message: str
    deleted: dict[str, int]


class UploadResponse(BaseModel):
    url: str
