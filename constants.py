import json
import os
import uuid

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))
RELOAD = os.getenv("RELOAD", "0") == "1"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Transport keepalive; a missed pong surfaces as a disconnect
WS_PING_INTERVAL = float(os.getenv("WS_PING_INTERVAL", 25))
WS_PING_TIMEOUT = float(os.getenv("WS_PING_TIMEOUT", 60))

DEFAULT_ICE_SERVERS = [
    {"urls": "stun:stun.l.google.com:19302"},
    {"urls": "stun:stun1.l.google.com:19302"},
    {"urls": "stun:stun2.l.google.com:19302"},
]
ICE_SERVERS = json.loads(os.getenv("ICE_SERVERS_JSON", "null")) or DEFAULT_ICE_SERVERS

# "host": authorized input goes to the host only
# "room": host plus co-viewers (cursor visualization)
INPUT_FANOUT_HOST = "host"
INPUT_FANOUT_ROOM = "room"
INPUT_FANOUT = os.getenv("INPUT_FANOUT", INPUT_FANOUT_ROOM)

REDIS_ENABLED = os.getenv("REDIS_ENABLED", "0") == "1"
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)
ROOM_ANNOUNCE_TTL = int(os.getenv("ROOM_ANNOUNCE_TTL", 3600))

INSTANCE_ID = os.getenv("INSTANCE_ID", uuid.uuid4().hex[:12])
