"""Status-recording wrapper around an ASGI ``send`` callable."""

from http import HTTPStatus

from prefixproxy._internal.asgi import Message, Send


class ResponseObserver:
    """Records the status code committed through ``send``.

    Every message is delegated unchanged and immediately; nothing is
    buffered or suppressed. ``status`` is ``0`` until the first
    ``http.response.start`` and never changes after it. A body sent
    without a prior start is observed as ``200``.
    """

    __slots__ = ("_send", "status")

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status = 0

    @property
    def started(self) -> bool:
        return self.status != 0

    async def __call__(self, message: Message) -> None:
        if not self.started:
            if message["type"] == "http.response.start":
                self.status = int(message["status"])
            elif message["type"] == "http.response.body":
                self.status = int(HTTPStatus.OK)
        await self._send(message)
