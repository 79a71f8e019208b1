"""Entry point for ``python -m modelmap_proxy``."""

import argparse
import os

import uvicorn

from .config_loader import get_server_settings, load_config


def main() -> None:
    parser = argparse.ArgumentParser(description="OpenAI-compatible model-mapping proxy")
    parser.add_argument("--host", default=None, help="Bind host (default: from config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: from config)")
    parser.add_argument("--config", default=None, help="Path to the YAML config file")
    args = parser.parse_args()

    if args.config:
        # create_app runs inside uvicorn and reads the path from the environment
        os.environ["MODELMAP_PROXY_CONFIG"] = args.config

    host, port = get_server_settings(load_config(args.config))

    uvicorn.run(
        "modelmap_proxy.main:create_app",
        factory=True,
        host=args.host or host,
        port=args.port or port,
    )


if __name__ == "__main__":
    main()
