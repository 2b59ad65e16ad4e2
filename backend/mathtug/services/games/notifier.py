from typing import Any, Optional


class SocketIONotifier:
    """Outbound messaging over Flask-SocketIO.

    Uses the server-level API so it also works from background tasks, where
    there is no request context for ``flask_socketio.emit`` or ``join_room``.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def room(self, room: str, event: str, payload: Optional[Any] = None) -> None:
        if payload is None:
            self.socketio.emit(event, to=room, namespace=self.namespace)
        else:
            self.socketio.emit(event, payload, to=room, namespace=self.namespace)

    def participant(self, participant_id: str, event: str, payload: Optional[Any] = None) -> None:
        # every sid is also a room of its own
        self.room(participant_id, event, payload)

    def join(self, participant_id: str, room: str) -> None:
        self.socketio.server.enter_room(participant_id, room, namespace=self.namespace)

    def leave(self, participant_id: str, room: str) -> None:
        self.socketio.server.leave_room(participant_id, room, namespace=self.namespace)
