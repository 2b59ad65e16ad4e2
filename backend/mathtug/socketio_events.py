from flask import current_app, request
from flask_socketio import emit


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _hub():
    return current_app.extensions['mathtug']


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] player={_get_sid()}")
    emit('connected', {'id': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] player={sid} reason={reason}")
    _hub().disconnect(sid)


def handle_join_game(data=None):
    _hub().join(_get_sid())


def handle_rematch(data=None):
    _hub().rematch(_get_sid())


def handle_submit_answer(answer=None):
    # Clients send the bare value; accept {'answer': ...} too
    if isinstance(answer, dict):
        answer = answer.get('answer')
    _hub().submit_answer(_get_sid(), answer)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    from mathtug import socketio

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_game', handle_join_game, namespace=namespace)
    socketio.on_event('rematch', handle_rematch, namespace=namespace)
    socketio.on_event('submit_answer', handle_submit_answer, namespace=namespace)
