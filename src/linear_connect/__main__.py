"""Webhook server entry point."""

from __future__ import annotations

import uvicorn

from linear_connect.common.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "linear_connect.webhook.app:create_app",
        factory=True,
        host=settings.webhook_host,
        port=settings.webhook_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
