"""Environment variable interpolation for task auth templates."""

import os
import re
from collections.abc import Mapping

# ${NAME} or bare $NAME
_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def interpolate_env(template: str, environ: Mapping[str, str] | None = None) -> str:
    """
    Substitute environment variable references in a template.

    Both ${NAME} and $NAME forms are supported. References to unset
    variables are left as literal text.

    Examples:
        "Bearer ${TOKEN}" + TOKEN=abc -> "Bearer abc"
        "token $MISSING"              -> "token $MISSING"
    """
    env = os.environ if environ is None else environ

    def replace(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        value = env.get(name)
        return match.group(0) if value is None else value

    return _ENV_REF.sub(replace, template)
