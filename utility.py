# utility.py
import random
import threading

# Hard coded names for the database and the collection
DATABASE_NAME = "Users-db"
COLLECTION_NAME = "User-Container"

# Every User lives in the same partition in this sample
PARTITION_KEY_VALUE = 1
PARTITION_KEY_PATH = "/partition_key"

ID_PREFIX = "unique_id"

_local = threading.local()


def _thread_rng() -> random.Random:
    rng = getattr(_local, "rng", None)
    if rng is None:
        # Random() with no seed pulls from os.urandom
        rng = random.Random()
        _local.rng = rng
    return rng


def get_id() -> str:
    """Generate a document id from a 64 bit random number, one generator per thread"""
    return f"{ID_PREFIX}{_thread_rng().getrandbits(64)}"
