from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_cycle_id() -> str:
    ts = datetime.now(tz=timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"cycle_{ts}_{uuid.uuid4().hex[:10]}"
