"""
Seat tokens for relay rooms.
A token names one room and one seat (player index); the websocket endpoint
only relays for the seat its token was issued for.
"""

import os
from datetime import datetime, timedelta
from jose import JWTError, jwt

SECRET_KEY = os.environ.get("JWT_SECRET", "change-me-in-production-use-env")
ALGORITHM = "HS256"
SEAT_TOKEN_EXPIRE_DAYS = 2


def create_seat_token(room_id: str, seat: int) -> str:
    expire = datetime.utcnow() + timedelta(days=SEAT_TOKEN_EXPIRE_DAYS)
    payload = {"sub": room_id, "seat": seat, "exp": expire}
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_seat_token(token: str) -> tuple[str, int] | None:
    """Return (room_id, seat) for a valid token, else None."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    room_id = payload.get("sub")
    seat = payload.get("seat")
    if not isinstance(room_id, str) or not isinstance(seat, int):
        return None
    return room_id, seat
