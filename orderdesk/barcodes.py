# orderdesk/barcodes.py
import random
import time


def mint_barcode() -> str:
    """Millisecond timestamp followed by a random number in [0, 1000).

    Collisions are unlikely but possible; the unique constraint on
    ``orders.barcode`` rejects them and the request fails with 409.
    """
    return f"{int(time.time() * 1000)}{random.randrange(1000)}"
