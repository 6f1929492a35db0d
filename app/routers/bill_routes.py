from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.bill_schema import CheckoutRequest, TableBillOut
from services import Services, get_services
from utils.auth.jwt_bearer import FLOOR_STAFF, require_roles
from utils.responses import ok
from utils.ws_manager import ws_manager

router = APIRouter(prefix="/bills", tags=["Bills"])


@router.get("/table/{table_id}", response_model=ApiResponse[TableBillOut])
def get_table_bill(table_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.bills.get_table_bill(db, table_id))


@router.post("/checkout", response_model=ApiResponse[None], dependencies=[Depends(require_roles(*FLOOR_STAFF))])
def checkout(
    body: CheckoutRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    result = services.bills.checkout_table(db, body.table_id, body.payment_method)
    background_tasks.add_task(
        ws_manager.notify,
        "table_updated",
        {"id": body.table_id, "isOccupied": False},
        table_id=body.table_id,
    )
    return ok(message=result["message"])
