"""Check PyPI for a newer release of this tool"""
from typing import Tuple

from requests import RequestException, Session

PYPI_URL = 'https://pypi.org/pypi/{name}/json'

STATUS_LATEST = 0
STATUS_DIFFERENT = 1
STATUS_ERROR = 2


def req_latest_version(name: str) -> str:
    """Retrieve the latest version of package `name` published on PyPI"""
    session = Session()
    req = session.get(PYPI_URL.format(name=name), timeout=60)
    req.raise_for_status()
    return req.json()['info']['version']


def check_update(name: str, version: str) -> Tuple[int, str]:
    """Compare `version` against PyPI, return an exit status and a message"""
    try:
        latest = req_latest_version(name)
    except (RequestException, ValueError, KeyError) as e:
        return STATUS_ERROR, f'error checking for updates: {e}'
    if latest == version:
        return STATUS_LATEST, f'you are running the latest version {version}'
    return STATUS_DIFFERENT, \
        f'a different version of {name} is available ({version} -> {latest})'
