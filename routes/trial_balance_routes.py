from fastapi import APIRouter, UploadFile, File, Form, HTTPException, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional
import os
import re
from services.trial_balance_service import TrialBalanceService
from services.export_service import ExportService
from services.file_processor import UnsupportedFileError
from services.kv_store import KVStore
from utils.logger import log_error
from config import MAX_UPLOAD_SIZE_MB, SUPPORTED_EXTENSIONS
from database import get_db

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PERIOD_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')

router = APIRouter()
export_service = ExportService()

def get_trial_balance_service(db: Session = Depends(get_db)) -> TrialBalanceService:
    return TrialBalanceService(KVStore(db))

@router.post("/trial-balance/upload")
async def upload_trial_balance(
    file: Optional[UploadFile] = File(None),
    companyId: Optional[str] = Form(None),
    period: Optional[str] = Form(None),
    previousPeriod: Optional[str] = Form(None),
    service: TrialBalanceService = Depends(get_trial_balance_service)
):
    """Upload a trial balance (CSV or Excel), validate it and store the result"""
    if file is None or not file.filename or not companyId or not period:
        raise HTTPException(status_code=400, detail="File, companyId, and period are required")

    for label, value in (("period", period), ("previousPeriod", previousPeriod)):
        if value and not PERIOD_PATTERN.match(value):
            raise HTTPException(status_code=400, detail=f"{label} must be formatted as YYYY-MM")

    file_ext = os.path.splitext(file.filename)[1].lower()
    if file_ext not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file format. Please upload CSV or Excel file."
        )

    content = await file.read()
    if len(content) > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=400, detail=f"File exceeds {MAX_UPLOAD_SIZE_MB} MB limit")

    try:
        return service.process_upload(content, file.filename, companyId, period, previousPeriod or None)
    except UnsupportedFileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log_error(f"Trial balance upload failed: {str(e)}",
                  {"filename": file.filename, "companyId": companyId, "period": period})
        raise HTTPException(status_code=500, detail=f"Failed to process trial balance: {str(e)}")

@router.get("/trial-balance/get")
async def get_trial_balance(
    companyId: Optional[str] = None,
    period: Optional[str] = None,
    service: TrialBalanceService = Depends(get_trial_balance_service)
):
    """Stored validation result for a company and period"""
    if not companyId or not period:
        raise HTTPException(status_code=400, detail="companyId and period are required")

    result = service.get_result(companyId, period)
    if result is None:
        raise HTTPException(status_code=404, detail="No trial balance found for this company and period")
    return result

@router.get("/trial-balance/export")
async def export_trial_balance(
    companyId: Optional[str] = None,
    period: Optional[str] = None,
    service: TrialBalanceService = Depends(get_trial_balance_service)
):
    """Stored validation result as an Excel report"""
    if not companyId or not period:
        raise HTTPException(status_code=400, detail="companyId and period are required")

    result = service.get_result(companyId, period)
    if result is None:
        raise HTTPException(status_code=404, detail="No trial balance found for this company and period")

    content = export_service.build_report(result)
    filename = f"TrialBalance_{companyId}_{period}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )

@router.get("/trial-balance/template")
async def download_template():
    """Blank trial balance in the layout the upload endpoint reads"""
    return Response(
        content=export_service.build_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="TrialBalance_Template.xlsx"'}
    )
