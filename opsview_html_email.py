"""Script that turns a nagios notification into raw HTML email data.

Meant to be run from nagios/opsview as a notification command, the output
is suitable for passing to something like `sendmail -t` or `mailx -t`.
"""
import argparse
import logging
import sys
from dataclasses import dataclass, field
from os import environ
from typing import List, Optional

from dotenv import load_dotenv

from notification import (PACKAGE_NAME, PACKAGE_VERSION, build_context, classify,
    default_subject, nagios_env)
from template_renderer import BUILTIN_TEMPLATE_DIR, TemplateRenderer
from update_check import check_update

load_dotenv()

def usage() -> str:
    """Help text for the command"""
    return '\n'.join([
        'Usage: opsview-html-email [options] [arg1] [arg2] ...',
        '',
        'This command is meant to be run from nagios when a service or host',
        'experiences problems.  The output will be suitable for passing to',
        'a mail program that takes raw email data like `mailx -t`',
        '',
        'Options',
        '  -a, --address <email>      the email address to send mail to, defaults to env NAGIOS_CONTACTEMAIL',
        '  -h, --help                 print this message and exit',
        '  -s, --subject <subject>    the email subject to use, defaults to a subject built for the host/service/ack',
        '  -t, --template-dir <dir>   dir to find jinja2 template files, defaults to builtin templates',
        '  -u, --updates              check for available updates on PyPI',
        '  -v, --version              print the version number and exit',
    ])

@dataclass
class Options:
    """Settings for a single run, filled from the command line and environment"""
    to: Optional[str] = None
    subject: Optional[str] = None
    template_dir: str = BUILTIN_TEMPLATE_DIR
    args: List[str] = field(default_factory=list)

def print_usage():
    print(usage())
    sys.exit(0)

def print_version():
    print(PACKAGE_VERSION)
    sys.exit(0)

def print_updates():
    status, message = check_update(PACKAGE_NAME, PACKAGE_VERSION)
    print(message)
    sys.exit(status)

class ArgumentParser(argparse.ArgumentParser):
    """Parser that reports bad usage with the full usage text and exit code 1"""
    def error(self, message):
        print(usage(), file=sys.stderr)
        sys.exit(1)

class RunAction(argparse.Action):
    """Flag that runs its `const` callable as soon as it is seen on the command line"""
    def __init__(self, option_strings, dest, const=None, **kwargs):
        super().__init__(option_strings, dest, nargs=0, const=const,
            default=argparse.SUPPRESS, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        self.const()

def build_parser() -> ArgumentParser:
    """Command line options, parsed in order and stopping at the first argument"""
    ap = ArgumentParser(prog='opsview-html-email', add_help=False, allow_abbrev=False)
    ap.add_argument('-a', '--address')
    ap.add_argument('-h', '--help', action=RunAction, const=print_usage)
    ap.add_argument('-s', '--subject')
    ap.add_argument('-t', '--template-dir')
    ap.add_argument('-u', '--updates', action=RunAction, const=print_updates)
    ap.add_argument('-v', '--version', action=RunAction, const=print_version)
    ap.add_argument('args', nargs=argparse.REMAINDER)
    return ap

def parse_options(argv: List[str]) -> Options:
    """Parse `argv`, handling help, version and update checks on the spot"""
    parsed = build_parser().parse_args(argv)
    return Options(
        to=parsed.address if parsed.address is not None else environ.get('NAGIOS_CONTACTEMAIL'),
        subject=parsed.subject,
        template_dir=parsed.template_dir
            or environ.get('OPSVIEW_HTML_EMAIL_TEMPLATE_DIR', BUILTIN_TEMPLATE_DIR),
        args=parsed.args,
    )

def log_level() -> str:
    """Logging level name from `LOG_LEVEL`, WARNING when unset or unknown"""
    level = environ.get('LOG_LEVEL', 'WARNING').upper()
    if not isinstance(logging.getLevelName(level), int):
        return 'WARNING'
    return level

def emit(to: str, subject: str, message: str):
    """Write email headers and body to stdout"""
    print(f'To: {to}')
    print(f'Reply-To: {to}')
    print(f'Subject: {subject}')
    print('Content-Type: text/html')
    print()
    print(message)

def main(argv: Optional[List[str]] = None):
    """Main program"""
    logging.basicConfig(level=log_level())
    opts = parse_options(sys.argv[1:] if argv is None else argv)

    nagios = nagios_env(environ)
    alert_type = classify(nagios)
    logging.info('Notification type is "%s"', alert_type.value)

    # the email address to whom the notification should be sent
    if not opts.to:
        print('env NAGIOS_CONTACTEMAIL or `-a <address>` must be supplied!', file=sys.stderr)
        print(file=sys.stderr)
        print(usage(), file=sys.stderr)
        sys.exit(1)

    if not opts.subject:
        opts.subject = default_subject(alert_type, nagios)

    renderer = TemplateRenderer(opts.template_dir)
    message = renderer.render(alert_type, build_context(opts.args, nagios))
    emit(opts.to, opts.subject, message)

if __name__ == "__main__":
    main()
