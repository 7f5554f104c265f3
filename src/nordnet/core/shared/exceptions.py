from typing import Optional


class NordnetException(Exception):
    pass


class ClientInitializationException(NordnetException):
    pass


class NordnetSessionException(NordnetException):
    pass


class NordnetTransportException(NordnetException):
    pass


class NordnetDecodeException(NordnetException):
    pass


class NordnetResponseException(NordnetException):
    status: int
    body: str
    code: Optional[str]
    message: Optional[str]

    def __init__(self, status: int, body: str, code: Optional[str] = None, message: Optional[str] = None):
        self.status = status
        self.body = body
        self.code = code
        self.message = message
        super().__init__(str(self))

    def __str__(self):
        if self.code or self.message:
            return f"Nordnet API error: {self.status} - {self.code}: {self.message}"
        return f"Nordnet API error: {self.status} - {self.body}"
