# shop/api/routers/health.py
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shop.data.database import get_db

router = APIRouter(tags=["health"])


@router.get("/")
def root():
    return {"message": "welcome to ecommerce app"}


@router.get("/health")
def health(db: Session = Depends(get_db)):
    info = {"backend": "running", "database": "disconnected"}
    try:
        db.execute(text("SELECT 1"))
        info["database"] = "connected"
    except SQLAlchemyError as e:
        info["error"] = str(e)
    return info
