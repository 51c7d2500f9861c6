"""Recipe metadata catalog router.

Endpoints:
- GET /api/classifications
- GET /api/sources
- GET /api/meals
- GET /api/courses
- GET /api/preparations
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import MetadataOut
from ..services import metadata

router = APIRouter()


@router.get("/classifications", response_model=list[MetadataOut])
def list_classifications(db: Session = Depends(get_db)):
    return metadata.list_entries(db, "classifications")


@router.get("/sources", response_model=list[MetadataOut])
def list_sources(db: Session = Depends(get_db)):
    return metadata.list_entries(db, "sources")


@router.get("/meals", response_model=list[MetadataOut])
def list_meals(db: Session = Depends(get_db)):
    return metadata.list_entries(db, "meals")


@router.get("/courses", response_model=list[MetadataOut])
def list_courses(db: Session = Depends(get_db)):
    return metadata.list_entries(db, "courses")


@router.get("/preparations", response_model=list[MetadataOut])
def list_preparations(db: Session = Depends(get_db)):
    return metadata.list_entries(db, "preparations")
