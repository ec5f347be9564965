"""Classes and helpers to represent a Nagios notification"""
from enum import Enum
from importlib import metadata
from typing import Mapping, Dict, List

PACKAGE_NAME = 'opsview-html-email'

def package_version() -> str:
    """Installed version of this tool"""
    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        # running from a source checkout
        return '1.0.0'

PACKAGE_VERSION = package_version()

ENV_PREFIX = 'NAGIOS_'

class AlertType(Enum):
    """Kinds of notification, the value doubles as the template name"""
    HOST = 'host'
    SERVICE = 'service'
    ACKNOWLEDGEMENT = 'ack'

def nagios_env(environ: Mapping[str, str]) -> Dict[str, str]:
    """Return the `NAGIOS_` variables of `environ` with the prefix stripped"""
    return {
        key[len(ENV_PREFIX):]: value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX)
    }

def classify(nagios: Mapping[str, str]) -> AlertType:
    """Determine the alert type from a nagios environment snapshot"""
    # host and service alerts can't be told apart the way nagios does it,
    # only service notifications carry a service attempt
    if not nagios.get('SERVICEATTEMPT'):
        return AlertType.HOST
    if nagios.get('NOTIFICATIONAUTHOR'):
        return AlertType.ACKNOWLEDGEMENT
    return AlertType.SERVICE

def default_subject(alert_type: AlertType, nagios: Mapping[str, str]) -> str:
    """Build the subject line used when none is given on the command line"""
    def get(key):
        return nagios.get(key, '')

    if alert_type == AlertType.HOST:
        return f'{get("HOSTADDRESS")} is {get("HOSTSTATE")}'
    if alert_type == AlertType.SERVICE:
        return f'{get("SERVICESTATE")}: {get("HOSTADDRESS")} - {get("SERVICEDESC")}'
    if alert_type == AlertType.ACKNOWLEDGEMENT:
        return f'{get("NOTIFICATIONTYPE")}: {get("HOSTADDRESS")} - {get("SERVICEDESC")}'
    return f'unknown type - {getattr(alert_type, "value", alert_type)}'

def build_context(args: List[str], nagios: Mapping[str, str]) -> dict:
    """Combine arguments, environment and package metadata for templating"""
    return {
        'args': list(args),
        'nagios': dict(nagios),
        'package': {
            'name': PACKAGE_NAME,
            'version': PACKAGE_VERSION,
        },
    }
