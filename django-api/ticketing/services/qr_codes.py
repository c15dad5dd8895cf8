"""QR code generation for issued tickets.

Codes combine a millisecond timestamp, a process-wide counter and a random
suffix. Generation alone does not guarantee uniqueness; issuance always checks
the store before accepting a code.
"""

import itertools
import secrets
import time
from collections.abc import Callable

from ticketing.domain import QRCode

QRCodeGenerator = Callable[[], QRCode]

_counter = itertools.count(1)


def generate_qr_code() -> QRCode:
    millis = int(time.time() * 1000)
    return QRCode(f"QR-{millis}-{next(_counter):06d}-{secrets.token_hex(5)}")
