"""Mailer factory — get_mailer() / set_mailer() / reset_mailer().

Only the in-memory mailer ships here; an SMTP or API-backed adapter is
installed with ``set_mailer`` at startup.
"""

from ordering.mail.fake_adapter import FakeMailer
from ordering.mail.port import MailPort

_current_mailer: MailPort | None = None


def get_mailer() -> MailPort:
    global _current_mailer
    if _current_mailer is None:
        _current_mailer = FakeMailer()
    return _current_mailer


def set_mailer(mailer: MailPort) -> None:
    global _current_mailer
    _current_mailer = mailer


def reset_mailer() -> None:
    global _current_mailer
    _current_mailer = None
