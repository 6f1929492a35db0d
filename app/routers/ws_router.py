import json
import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from schemas import UserRole
from utils.auth.jwt_handler import TokenExpired, verify_access_token
from utils.ws_manager import table_room, ws_manager

logger = logging.getLogger(__name__)

router = APIRouter()

STAFF_ROLES = {role.value for role in (UserRole.ADMIN, UserRole.STAFF, UserRole.KITCHEN)}


def _staff_claims(token: Optional[str]) -> Optional[dict]:
    if not token:
        return None
    try:
        payload = verify_access_token(token)
    except TokenExpired:
        return None
    if payload is None or payload.get("role") not in STAFF_ROLES:
        return None
    return payload


async def _listen(websocket: WebSocket):
    # clients only ever ping; anything else is ignored
    while True:
        raw = await websocket.receive_text()
        try:
            message = json.loads(raw)
        except ValueError:
            continue
        if isinstance(message, dict) and message.get("action") == "ping":
            await websocket.send_text(json.dumps({"event": "pong"}))


@router.websocket("/ws/staff")
async def websocket_staff(websocket: WebSocket, token: Optional[str] = None):
    claims = _staff_claims(token)
    if claims is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await ws_manager.connect_staff(websocket)
    logger.info("staff socket connected for %s", claims.get("username"))
    try:
        await _listen(websocket)
    except WebSocketDisconnect:
        await ws_manager.disconnect(websocket)


@router.websocket("/ws/tables/{table_id}")
async def websocket_table(websocket: WebSocket, table_id: int):
    await ws_manager.connect_room(websocket, table_room(table_id))
    try:
        await _listen(websocket)
    except WebSocketDisconnect:
        await ws_manager.disconnect(websocket)
