from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.models.branch import Branch
from backend.routes.common import database_unavailable, ensure_database_ready
from backend.schemas.branch import BranchResponse

router = APIRouter(tags=['branches'])


@router.get('', response_model=list[BranchResponse])
def list_branches(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return db.query(Branch).order_by(Branch.name.asc()).all()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
