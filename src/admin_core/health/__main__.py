"""Allow running the health check as: python -m admin_core.health [--config path]."""

import argparse
import sys

from admin_core.health.check import main

parser = argparse.ArgumentParser(description="Admin backend health check")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
sys.exit(main(config_path=args.config))
