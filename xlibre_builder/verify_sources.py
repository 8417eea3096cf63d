#!/usr/bin/env python3
"""
Checks that every upstream repository in the package set exists on GitHub
"""

import logging
import sys
from urllib.parse import urlparse

import requests

from .common.logging_utils import setup_logging
from .packages import get_package_set

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com/repos/{owner}/{repo}"


def github_slug(source_url):
    """owner/repo for a github.com URL, None for anything else"""
    parsed = urlparse(source_url)
    if parsed.netloc != "github.com":
        return None
    parts = parsed.path.strip("/").split("/")
    if len(parts) < 2:
        return None
    repo = parts[1][:-4] if parts[1].endswith(".git") else parts[1]
    return parts[0], repo


def check_repository_exists(source_url, session=None, timeout=10):
    """True when the GitHub API knows the repository"""
    slug = github_slug(source_url)
    if slug is None:
        logger.warning(f"⚠️ Not a GitHub repository, cannot verify: {source_url}")
        return False
    owner, repo = slug
    getter = session.get if session is not None else requests.get
    try:
        response = getter(API_URL.format(owner=owner, repo=repo), timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error checking {source_url}: {e}")
        return False
    return response.status_code == 200


def verify_package_sources(package_set, session=None):
    """Returns the identifiers whose upstream repository could not be found"""
    missing = []
    for spec in package_set:
        if not spec.source_url:
            continue
        if check_repository_exists(spec.source_url, session=session):
            logger.info(f"✓ {spec.identifier} - {spec.source_url}")
        else:
            logger.error(f"✗ {spec.identifier} - {spec.source_url} NOT FOUND!")
            missing.append(spec.identifier)
    return missing


def main():
    setup_logging()
    logger.info("Checking upstream repositories for all packages...")
    missing = verify_package_sources(get_package_set())
    if missing:
        logger.error(f"{len(missing)} upstream repositories missing")
        sys.exit(1)
    logger.info("All upstream repositories found")
    sys.exit(0)


if __name__ == "__main__":
    main()
