#!/usr/bin/env python3
"""
Plugin manifest validation script for the ShardDog Treat Gateway.

Validates either the manifest built from the local environment or the one
served by a running gateway (--url).
"""

import argparse
import json
import logging
import sys

import httpx

from shared.config import get_config
from service_treats.app.manifest import PluginManifestProvider, validate_manifest

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def load_manifest(url: str = None) -> dict:
    """Fetch the manifest from a gateway, or build it from local settings."""
    if url:
        response = httpx.get(f"{url.rstrip('/')}/api/ai-plugin", timeout=10.0)
        response.raise_for_status()
        return response.json()
    return PluginManifestProvider(get_config("treats", 8000)).get_manifest()


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate the treat gateway plugin manifest")
    parser.add_argument("--url", help="Base URL of a running gateway")
    parser.add_argument("--print", action="store_true", dest="print_manifest", help="Print the manifest")
    args = parser.parse_args()

    try:
        manifest = load_manifest(args.url)
    except httpx.HTTPError as e:
        logger.error(f"Could not fetch manifest: {e}")
        return 2

    if args.print_manifest:
        print(json.dumps(manifest, indent=2))

    problems = validate_manifest(manifest)
    for problem in problems:
        logger.error(problem)

    if problems:
        logger.error(f"Manifest has {len(problems)} problem(s)")
        return 1

    logger.info("Manifest is valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
