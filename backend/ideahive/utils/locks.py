import threading
import zlib

# Fixed stripe count keeps memory bounded regardless of page count
LOCK_STRIPES = 64

_stripes = [threading.RLock() for _ in range(LOCK_STRIPES)]


def page_lock(page_id: str):
    """Lock serializing content mutations of one page within this process."""
    index = zlib.crc32(str(page_id).encode("utf-8")) % LOCK_STRIPES
    return _stripes[index]
