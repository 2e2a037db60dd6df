#!/usr/bin/env python3
"""
Utility script to clean up server containers left behind by pgfixture.
Run this if test processes were killed before their scopes could tear down.

Usage:
    python scripts/cleanup_fixture_containers.py [--dry-run]
"""

import argparse
import sys

import docker

from pgfixture.errors import ProvisionFailed, TeardownFailed
from pgfixture.testing.docker_manager import DockerRuntime


def cleanup_fixture_containers(runtime: DockerRuntime, dry_run: bool = False) -> dict:
    """
    Stop and remove every container labelled as managed by pgfixture.

    Returns:
        Counts of containers found, removed and failed
    """
    counts = {'found': 0, 'removed': 0, 'failed': 0}

    print("🧹 Looking for leaked pgfixture containers...")
    for container in runtime.list_managed():
        counts['found'] += 1
        if dry_run:
            print(f"  [DRY RUN] Would remove container: {container.name}")
            continue
        try:
            print(f"  Removing container: {container.name}")
            runtime.stop_and_remove(container)
            counts['removed'] += 1
        except TeardownFailed as e:
            print(f"    ⚠️  {e}")
            counts['failed'] += 1

    print("\n✅ Cleanup complete!")
    if dry_run:
        print(f"  Containers found: {counts['found']} (dry run, nothing removed)")
    else:
        print(f"  Containers removed: {counts['removed']}")
        if counts['failed']:
            print(f"  Containers that could not be removed: {counts['failed']}")
    return counts


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Remove PostgreSQL containers leaked by interrupted pgfixture runs"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be cleaned up without actually removing anything"
    )
    args = parser.parse_args(argv)

    try:
        runtime = DockerRuntime()
    except ProvisionFailed as e:
        print(f"❌ {e}")
        return 1

    try:
        counts = cleanup_fixture_containers(runtime, dry_run=args.dry_run)
    except docker.errors.DockerException as e:
        print(f"❌ Error listing containers: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\n⚠️  Cleanup interrupted by user")
        return 1
    return 1 if counts['failed'] else 0


if __name__ == "__main__":
    sys.exit(main())
