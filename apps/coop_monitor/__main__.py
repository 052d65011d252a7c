from __future__ import annotations

import uvicorn

from apps.coop_monitor.config import Settings


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run("apps.coop_monitor.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
