# Inbound
JOIN = "join"
START_HOST = "start-host"
SIGNAL = "signal"
CURSOR_REQUEST = "cursor-request"
CURSOR_RESPONSE = "cursor-response"
MOUSE_MOVE = "mouseMove"
MOUSE_CLICK = "mouseClick"
INPUT_EVENT = "input-event"
LEAVE = "leave"

INPUT_EVENTS = (MOUSE_MOVE, MOUSE_CLICK, INPUT_EVENT)

# Outbound only
CONNECTED = "connected"
JOINED = "joined"
USER_JOINED = "user-joined"
USER_DISCONNECTED = "user-disconnected"
HOST_STOPPED = "host-stopped"
NO_HOST = "no-host"
ERROR = "error"
