"""
FastAPI relay for Tile Duel.
Pairs two peers in a room and forwards their game messages over websockets.
The relay never runs the game; each peer runs its own TurnCoordinator.
"""

import json
import secrets
import string
import uuid
from collections import deque
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session

from .auth import create_seat_token, decode_seat_token
from .database import SessionLocal, get_db, init_db
from .models import Room

from tileduel.config import DEFAULT_GRID_SIZE
from tileduel.engine import PLAYERS
from tileduel.engine.messages import parse_message
from tileduel.engine.queries import get_game_summary
from tileduel.engine.state import GameState

app = FastAPI(
    title="Tile Duel Relay",
    description="Pairs two Tile Duel peers and relays their moves and seeds",
    version="1.0.0",
)

# CORS configuration for frontend
CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers and full traceback so the frontend can read the error."""
    import traceback
    tb = traceback.format_exc()
    traceback.print_exc()
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "traceback": tb},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# Open sockets: room_id -> seat -> websocket
connections: dict[str, dict[int, WebSocket]] = {}

# Messages for a seat that is not connected yet: room_id -> seat -> queued messages
outboxes: dict[str, dict[int, deque]] = {}

# Alphanumeric for room codes (uppercase + digits)
ROOM_CODE_CHARS = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH = 4
# Per-seat queue limit while the peer is away
OUTBOX_LIMIT = 64


# ===== Pydantic Models =====

class CreateRoomRequest(BaseModel):
    grid_size: int = Field(default=DEFAULT_GRID_SIZE, ge=2, le=8)


class JoinRoomRequest(BaseModel):
    room_code: str


class RelayMessage(BaseModel):
    """Wire message between peers. Exactly one shape is used per message."""
    connected: bool | None = None
    state: dict[str, Any] | None = None
    move: int | None = Field(default=None, ge=0, le=3)
    seed: float | None = Field(default=None, ge=0.0, lt=1.0)
    turn: int | None = Field(default=None, ge=0)


# ===== Helper Functions =====

def generate_room_code(db: Session) -> str:
    """Generate a unique 4-char alphanumeric room code."""
    for _ in range(20):
        code = "".join(secrets.choice(ROOM_CODE_CHARS) for _ in range(ROOM_CODE_LENGTH))
        if db.query(Room).filter(Room.room_code == code).first() is None:
            return code
    raise HTTPException(status_code=500, detail="Could not generate unique room code")


def get_room(room_id: str, db: Session) -> Room:
    row = db.query(Room).filter(Room.id == room_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
    return row


def stored_state(row: Room) -> dict[str, Any] | None:
    """Last handed-off state for the room, or None if missing or unreadable."""
    if not row.game_state:
        return None
    try:
        raw = json.loads(row.game_state)
    except (TypeError, json.JSONDecodeError):
        return None
    return raw if isinstance(raw, dict) else None


def validate_relay_message(data: Any) -> dict[str, Any]:
    """Validate an incoming wire message; returns the cleaned dict or raises ValueError."""
    try:
        message = RelayMessage.model_validate(data)
    except ValidationError as e:
        raise ValueError(str(e))
    cleaned = message.model_dump(exclude_none=True)
    parse_message(cleaned)
    return cleaned


def room_is_open(room_id: str) -> bool:
    """True if the room exists and has not been finished."""
    db = SessionLocal()
    try:
        row = db.query(Room).filter(Room.id == room_id).first()
        return row is not None and row.status != "finished"
    finally:
        db.close()


def save_state(room_id: str, state: dict[str, Any]) -> bool:
    """Persist a handed-off state if it describes a valid game. Returns True if stored."""
    try:
        GameState.from_dict(state)
    except ValueError:
        return False
    db = SessionLocal()
    try:
        row = db.query(Room).filter(Room.id == room_id).first()
        if not row:
            return False
        row.game_state = json.dumps(state)
        db.commit()
        return True
    finally:
        db.close()


async def deliver(room_id: str, seat: int, message: dict[str, Any]) -> bool:
    """Send to a seat if connected, otherwise queue it. Returns True if sent now."""
    socket = connections.get(room_id, {}).get(seat)
    if socket is not None:
        try:
            await socket.send_json(message)
            return True
        except (WebSocketDisconnect, RuntimeError, OSError):
            # Peer went away before its handler cleaned up; queue for its reconnect
            print(f"[relay] {room_id} seat {seat} unreachable, queueing", flush=True)
            if connections.get(room_id, {}).get(seat) is socket:
                del connections[room_id][seat]
    queue = outboxes.setdefault(room_id, {}).setdefault(seat, deque(maxlen=OUTBOX_LIMIT))
    queue.append(message)
    return False


@app.on_event("startup")
def on_startup():
    init_db()


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Tile Duel Relay", "version": "1.0.0"}


@app.post("/rooms")
def create_room(request: CreateRoomRequest, db: Session = Depends(get_db)):
    """Create a room. The creator holds seat 0 and hands the first state to the joiner."""
    room_id = str(uuid.uuid4())
    row = Room(
        id=room_id,
        room_code=generate_room_code(db),
        status="waiting",
        seats_taken=1,
        grid_size=request.grid_size,
    )
    db.add(row)
    db.commit()
    print(f"[room] created {row.room_code} ({room_id})", flush=True)
    return {
        "room_id": room_id,
        "room_code": row.room_code,
        "seat": 0,
        "token": create_seat_token(room_id, 0),
        "grid_size": row.grid_size,
    }


@app.post("/rooms/join")
def join_room(request: JoinRoomRequest, db: Session = Depends(get_db)):
    """Join a room by 4-char room code, taking seat 1."""
    code = request.room_code.strip().upper()
    if len(code) != ROOM_CODE_LENGTH:
        raise HTTPException(status_code=400, detail="Room code must be 4 characters")
    row = db.query(Room).filter(Room.room_code == code).first()
    if not row:
        raise HTTPException(status_code=404, detail="Room not found")
    if row.seats_taken >= PLAYERS:
        raise HTTPException(status_code=409, detail="Room is full")
    seat = row.seats_taken
    row.seats_taken = seat + 1
    row.status = "active"
    db.commit()
    print(f"[room] {code} seat {seat} joined", flush=True)
    return {
        "room_id": row.id,
        "room_code": row.room_code,
        "seat": seat,
        "token": create_seat_token(row.id, seat),
        "grid_size": row.grid_size,
    }


@app.get("/rooms/{room_id}")
def get_room_meta(room_id: str, db: Session = Depends(get_db)):
    """Room metadata, who is online, and the last handed-off state with a summary."""
    row = get_room(room_id, db)
    state = stored_state(row)
    summary = None
    if state is not None:
        try:
            summary = get_game_summary(GameState.from_dict(state))
        except ValueError:
            summary = None
    return {
        "id": row.id,
        "room_code": row.room_code,
        "status": row.status,
        "seats_taken": row.seats_taken,
        "grid_size": row.grid_size,
        "online": sorted(connections.get(room_id, {}).keys()),
        "created_at": row.created_at.isoformat() if row.created_at else None,
        "state": state,
        "summary": summary,
    }


@app.delete("/rooms/{room_id}")
def close_room(room_id: str, token: str, db: Session = Depends(get_db)):
    """Mark a room finished. Caller must hold a seat token for it."""
    claims = decode_seat_token(token)
    if claims is None or claims[0] != room_id:
        raise HTTPException(status_code=403, detail="Not a seat in this room")
    row = get_room(room_id, db)
    row.status = "finished"
    db.commit()
    outboxes.pop(room_id, None)
    return {"message": f"Room {room_id} finished"}


@app.websocket("/rooms/{room_id}/ws")
async def relay(websocket: WebSocket, room_id: str, token: str):
    """
    Relay messages between the two seats of a room.
    Each validated message is forwarded to the other seat (queued if it is away);
    state handoffs are also stored for reconnects.
    """
    claims = decode_seat_token(token)
    if claims is None or claims[0] != room_id:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    seat = claims[1]

    if not await run_in_threadpool(room_is_open, room_id):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    room = connections.setdefault(room_id, {})
    previous = room.get(seat)
    room[seat] = websocket
    print(f"[relay] {room_id} seat {seat} connected", flush=True)
    if previous is not None:
        print(f"[relay] {room_id} seat {seat} replaced an older socket", flush=True)

    queued = outboxes.get(room_id, {}).pop(seat, None)
    if queued:
        for message in queued:
            await websocket.send_json(message)

    other = (seat + 1) % PLAYERS
    try:
        while True:
            data = await websocket.receive_json()
            try:
                message = validate_relay_message(data)
            except ValueError as e:
                await websocket.send_json({"error": str(e)})
                continue
            if "state" in message and not await run_in_threadpool(save_state, room_id, message["state"]):
                print(f"[relay] {room_id} seat {seat} sent an unusable state", flush=True)
            await deliver(room_id, other, message)
    except WebSocketDisconnect:
        print(f"[relay] {room_id} seat {seat} disconnected", flush=True)
    finally:
        if connections.get(room_id, {}).get(seat) is websocket:
            del connections[room_id][seat]
            if not connections[room_id]:
                del connections[room_id]


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
