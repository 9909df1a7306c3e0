# app/routers/clients_router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.utils.database import get_db, transaction
from app.models.client_model import Client
from app.services.cascade_eraser import delete_client
from app.core.exceptions import NotFoundError
from app.schemas.client_schema import (
    ClientCreate,
    ClientCreated,
    ClientOut,
    ClientDetailOut,
    ClientDeleteResult,
)

router = APIRouter(prefix="/clients", tags=["Clients"])


# CREATE
@router.post("", response_model=ClientCreated, status_code=status.HTTP_201_CREATED)
def create_client(payload: ClientCreate, db: Session = Depends(get_db)):
    client = Client(
        full_name=payload.full_name,
        document=payload.document,
        phone=payload.phone,
        address=payload.address,
    )
    with transaction(db):
        db.add(client)
    return {"id": client.id}


# READ ALL
@router.get("", response_model=list[ClientOut])
def list_clients(db: Session = Depends(get_db)):
    return db.query(Client).order_by(Client.id.desc()).all()


# READ ONE (with loans)
@router.get("/{client_id}", response_model=ClientDetailOut)
def get_client(client_id: int, db: Session = Depends(get_db)):
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise NotFoundError("client not found")
    return client


# DELETE (cascades to loans)
@router.delete("/{client_id}", response_model=ClientDeleteResult)
def remove_client(client_id: int, db: Session = Depends(get_db)):
    deleted = delete_client(db, client_id)
    return {"ok": True, "deleted_loans": deleted}
