"""Renders the HTML body of a notification email from jinja2 templates"""
import json
import logging
import sys
from os import path

from jinja2 import Environment, FileSystemLoader, TemplateError

from notification import AlertType, PACKAGE_NAME

MODULE_DIR = path.dirname(path.abspath(__file__))

def find_builtin_template_dir(module_dir: str = MODULE_DIR, prefix: str = sys.prefix) -> str:
    """Locate the builtin templates beside the modules, or where pip installs them"""
    local = path.join(module_dir, 'templates')
    if path.isdir(local):
        return local
    return path.join(prefix, 'share', PACKAGE_NAME, 'templates')

BUILTIN_TEMPLATE_DIR = find_builtin_template_dir()

class TemplateRenderer:
    """Renders a per-type template, falling back to a JSON dump of the context"""

    TEMPLATE_SUFFIX = '.html.j2'
    # used when something goes wrong or no template can be found,
    # it is just the data provided by the nagios daemon
    FALLBACK_TEMPLATE = '<html><body><pre>{{ d }}</pre></body></html>'

    def __init__(self, template_dir: str = BUILTIN_TEMPLATE_DIR):
        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=True
        )

    def template_path(self, alert_type: AlertType) -> str:
        """Filesystem path of the template for `alert_type`"""
        return path.join(self.template_dir, self.template_name(alert_type))

    def template_name(self, alert_type: AlertType) -> str:
        """Name of the template for `alert_type` within the template dir"""
        return f'{alert_type.value}{self.TEMPLATE_SUFFIX}'

    def render_fallback(self, data: dict) -> str:
        """Render the builtin JSON dump, or describe why that failed"""
        try:
            return self.env.from_string(self.FALLBACK_TEMPLATE).render(data)
        except TemplateError as e:
            message = f'error rendering default template!: {e}'
            logging.error(message)
            return message

    def render(self, alert_type: AlertType, context: dict) -> str:
        """Render the body for `alert_type`, never raising on template problems"""
        data = dict(context)
        data['d'] = json.dumps(context, indent=2)
        message = self.render_fallback(data)

        try:
            template = self.env.get_template(self.template_name(alert_type))
            message = template.render(data)
        except Exception as e: # pylint: disable=broad-except
            # message still holds the fallback, leave it alone
            logging.error('template %s error: %s', self.template_path(alert_type), e)
        return message
