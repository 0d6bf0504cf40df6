"""Socket.IO presence: who is connected, and pushing notifications to them."""

import logging
import threading
from collections import defaultdict

from flask import request
from flask_jwt_extended import decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from gymbuddy.extensions import socketio

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """user_id -> socket ids. Inserted on connect, removed on disconnect."""

    def __init__(self):
        self._sids = defaultdict(set)
        self._users = {}
        self._lock = threading.Lock()

    def connect(self, user_id, sid):
        with self._lock:
            self._sids[user_id].add(sid)
            self._users[sid] = user_id

    def disconnect(self, sid):
        with self._lock:
            user_id = self._users.pop(sid, None)
            if user_id is None:
                return None
            sids = self._sids.get(user_id)
            if sids is not None:
                sids.discard(sid)
                if not sids:
                    del self._sids[user_id]
            return user_id

    def is_online(self, user_id):
        with self._lock:
            return bool(self._sids.get(user_id))

    def sids_for(self, user_id):
        with self._lock:
            return set(self._sids.get(user_id, ()))

    def clear(self):
        with self._lock:
            self._sids.clear()
            self._users.clear()


presence = PresenceRegistry()


def notify(user_id, event, payload):
    """Emit event to every connection of user_id. Returns False if offline."""
    sids = presence.sids_for(user_id)
    for sid in sids:
        socketio.emit(event, payload, to=sid)
    return bool(sids)


@socketio.on("connect")
def handle_connect(auth=None):
    token = auth.get("token") if isinstance(auth, dict) else None
    if not token:
        logger.info("Socket connection rejected: missing token")
        return False
    try:
        user_id = int(decode_token(token)["sub"])
    except (PyJWTError, JWTExtendedException, KeyError, TypeError, ValueError) as e:
        logger.info(f"Socket connection rejected: {e}")
        return False

    presence.connect(user_id, request.sid)
    logger.debug("User %s connected (%s)", user_id, request.sid)


@socketio.on("disconnect")
def handle_disconnect(*args):
    user_id = presence.disconnect(request.sid)
    if user_id is not None:
        logger.debug("User %s disconnected (%s)", user_id, request.sid)
