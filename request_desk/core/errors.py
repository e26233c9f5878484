# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Typed failures raised by services and translated to HTTP by controllers.

Access denial is NOT an error inside the policy engine, just a plain
``False``. ``Forbidden`` is only raised at the service boundary, after the
decision has been made.
"""


class RequestDeskError(Exception):
    """Base class for every domain failure."""

    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail or self.__class__.__name__


class Unauthenticated(RequestDeskError):
    status_code = 401


class Forbidden(RequestDeskError):
    status_code = 403


class NotFound(RequestDeskError):
    status_code = 404


class InvalidUser(RequestDeskError):
    """Assignment or recipient references a missing or inactive user."""

    status_code = 400


class InvalidInput(RequestDeskError):
    status_code = 400
