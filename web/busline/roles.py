from enum import Enum

class Role(str, Enum):
    """Enumerates every role a session token can carry.

    Using an Enum avoids typos when referring to roles across the code-base
    while still being JSON-serialisable (inherits from *str*).
    """

    guest = "guest"
    admin = "admin"
