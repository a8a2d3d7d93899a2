"""WebSocket protocol configuration and constants (browser <-> relay)."""

from __future__ import annotations

# Browser clients connect to the server root; /ws is also served.
WS_ROOT_PATH = "/"
WS_ENDPOINT_PATH = "/ws"

WS_KEY_TYPE = "type"

# Browser -> relay commands
WS_CMD_CONNECT = "connect"
WS_CMD_AUDIO_DATA = "audio_data"
WS_CMD_TEXT_MESSAGE = "text_message"
WS_CMD_COMMIT_AUDIO = "commit_audio"
WS_CMD_DISCONNECT = "disconnect"

# Relay -> browser frames
WS_MSG_CONNECTED = "connected"
WS_MSG_ERROR = "error"

WS_CONNECTED_MESSAGE = "Connected to OpenAI Realtime API"
WS_NOT_CONNECTED_MESSAGE = "Upstream session is not connected"
WS_GENERIC_ERROR_MESSAGE = "Unknown error"

WS_CLOSE_CLIENT_REQUEST_CODE = 1000

# ASGI message type for a closed browser socket
WS_DISCONNECT_EVENT = "websocket.disconnect"

__all__ = [
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CMD_AUDIO_DATA",
    "WS_CMD_COMMIT_AUDIO",
    "WS_CMD_CONNECT",
    "WS_CMD_DISCONNECT",
    "WS_CMD_TEXT_MESSAGE",
    "WS_CONNECTED_MESSAGE",
    "WS_DISCONNECT_EVENT",
    "WS_ENDPOINT_PATH",
    "WS_GENERIC_ERROR_MESSAGE",
    "WS_KEY_TYPE",
    "WS_MSG_CONNECTED",
    "WS_MSG_ERROR",
    "WS_NOT_CONNECTED_MESSAGE",
    "WS_ROOT_PATH",
]
