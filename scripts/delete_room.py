#!/usr/bin/env python3
"""
Delete a relay room by its 4-char code so the code can be reused.
Usage: python scripts/delete_room.py <room_code>
"""
import sys

from tileduel.api.database import SessionLocal, get_db_file_path
from tileduel.api.models import Room


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python scripts/delete_room.py <room_code>", file=sys.stderr)
        sys.exit(1)
    code = sys.argv[1].strip().upper()
    if not code:
        print("Error: provide a room code.", file=sys.stderr)
        sys.exit(1)

    db = SessionLocal()
    try:
        room = db.query(Room).filter(Room.room_code == code).first()
        if not room:
            print(f"No room found with code: {code!r}")
            return
        room_id = room.id
        db.delete(room)
        db.commit()
        print(f"Deleted room {code} ({room_id}).")
        db_path = get_db_file_path()
        if db_path:
            print(f"Database: {db_path}")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
