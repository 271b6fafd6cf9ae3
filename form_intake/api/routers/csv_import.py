"""
form_intake/api/routers/csv_import.py

CSV upload endpoint backed by the batch import service.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from form_intake.api.dependencies import get_csv_import_service, get_csv_upload
from form_intake.config import get_csv_import_settings
from form_intake.schemas.csv_import import CSVImportSummaryResponse
from form_intake.services.csv_import_service import (
    CSVFormatError,
    CSVImportPersistenceError,
    CSVImportService,
)

router = APIRouter(tags=["import"])


@router.post("/api/import-csv", response_model=CSVImportSummaryResponse)
async def import_csv(
    file: UploadFile = Depends(get_csv_upload),
    import_service: CSVImportService = Depends(get_csv_import_service),
) -> CSVImportSummaryResponse:
    """
    Import one uploaded CSV file into the import table.
    """

    max_bytes = get_csv_import_settings().max_file_bytes
    try:
        raw = await file.read(max_bytes + 1)
        if len(raw) > max_bytes:
            raise CSVFormatError(f"CSV file exceeds the {max_bytes} byte limit.")
        summary = await import_service.import_bytes(raw)
    except CSVFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except CSVImportPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to prepare the import table.",
        ) from exc
    finally:
        await file.close()

    return CSVImportSummaryResponse.from_summary(summary)
