from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from core.database import get_db
from modules.planning import schemas, service
from modules.reports.excel import build_snapshot_excel

router = APIRouter(prefix="/api", tags=["planning"])

SAVE_SUCCESS_MESSAGE = "Data saved successfully!"


@router.get("/data", response_model=schemas.Snapshot)
def get_data_endpoint(db: Session = Depends(get_db)):
    return service.get_snapshot(db)


@router.post("/save", response_model=schemas.SaveResult)
def save_data_endpoint(snapshot_in: schemas.SnapshotIn, db: Session = Depends(get_db)):
    service.replace_snapshot(db, snapshot_in)
    return {"message": SAVE_SUCCESS_MESSAGE}


@router.get("/data/excel")
def download_data_excel(db: Session = Depends(get_db)):
    snapshot = service.get_snapshot_records(db)
    stream = build_snapshot_excel(snapshot)
    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=planning_data.xlsx"},
    )
