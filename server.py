"""
Development server for the Tile Duel relay.
Runs the FastAPI app with uvicorn; peers connect to ws://localhost:PORT/rooms/<id>/ws.
"""

import os

import uvicorn

PORT = int(os.environ.get("PORT", "8000"))

if __name__ == "__main__":
    print(f"Serving relay at http://localhost:{PORT}")
    print("Create a room with POST /rooms, join with POST /rooms/join")
    print("Press Ctrl+C to stop")
    uvicorn.run("tileduel.api.main:app", host="0.0.0.0", port=PORT, reload=False)
