"""Router configuration.

RouterConfig is a frozen dataclass. A Router reads it once, at construction.
"""

from dataclasses import dataclass

DEFAULT_ERROR_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ status }} {{ reason }}</title>
</head>
<body>
  <h1>HTTP {{ status }} Error</h1>
  <p>{{ reason }}</p>
  {% if detailed_reason %}<pre>{{ detailed_reason }}</pre>{% end %}
</body>
</html>
"""


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(app_root="/api", debug=True)
    """

    # Every registered template is taken relative to app_root
    app_root: str = ""

    # Error pages
    debug: bool = False  # Show developer-facing reasons in HTML error pages
    error_content_type: str = "text/plain; charset=utf-8"
    html_error_content_type: str = "text/html; charset=utf-8"
    error_template: str = DEFAULT_ERROR_TEMPLATE
