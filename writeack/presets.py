"""Pre-built acknowledgment values.

Deprecated names are bound to the very same objects as their replacements.
"""

from __future__ import annotations

from .concern import SERVER_DEFAULT, AckSpec

# Wait for the primary, using the default configured on the server.
ACKNOWLEDGED = SERVER_DEFAULT

# Return once the message is on the socket; server errors go unreported.
UNACKNOWLEDGED = AckSpec.from_count(0)

W1 = AckSpec.from_count(1)
W2 = AckSpec.from_count(2)
W3 = AckSpec.from_count(3)

JOURNALED = AckSpec.make(1, journal=True)

MAJORITY = AckSpec.from_label("majority")

# Deprecated, prefer JOURNALED.
FSYNCED = AckSpec.make(1, fsync=True)

# Deprecated aliases
NORMAL = UNACKNOWLEDGED
SAFE = ACKNOWLEDGED
REPLICA_ACKNOWLEDGED = W2
REPLICAS_SAFE = W2
FSYNC_SAFE = FSYNCED
JOURNAL_SAFE = JOURNALED
