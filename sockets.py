import logging
from typing import Dict, List
from fastapi import WebSocket

logger = logging.getLogger("trainr")


class ConnectionManager:
    def __init__(self):
        # user id -> open sockets (a user may have several tabs open)
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.setdefault(user_id, []).append(websocket)
        logger.info(f"WS: {user_id} connected ({len(self.active_connections[user_id])} socket(s))")

    def disconnect(self, user_id: str, websocket: WebSocket):
        sockets = self.active_connections.get(user_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self.active_connections.pop(user_id, None)

    async def send_to_user(self, user_id: str, message: dict):
        # Iterate over a copy to avoid modification issues during iteration
        for connection in self.active_connections.get(user_id, [])[:]:
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.warning(f"WS: dropping socket for {user_id}: {e}")
                self.disconnect(user_id, connection)

# Global instance
manager = ConnectionManager()
