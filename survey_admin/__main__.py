"""Run the API with uvicorn: ``python -m survey_admin``."""

from __future__ import annotations

import uvicorn

from survey_admin.config import load_config


def main() -> None:
    cfg = load_config()
    uvicorn.run(
        "survey_admin.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=cfg.server.port,
        reload=cfg.server.environment == "development",
    )


if __name__ == "__main__":
    main()
