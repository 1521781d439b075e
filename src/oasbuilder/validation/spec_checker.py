"""Full OpenAPI schema validation through openapi-spec-validator.

:func:`check_full_spec` validates a parsed document against the OpenAPI
3.0 or 3.1 meta-schema (chosen from the ``openapi`` field) plus the
library's semantic checks, and reports every violation as a
:class:`~oasbuilder.models.SpecViolation` with its key path.

Two adjustments are made to the raw violations:

* A missing required property is reported at the path of the missing
  property rather than at its parent, so it lines up with the structural
  checks that report the same problem.
* Unresolved path parameters are dropped; the structural checks report
  those with a clearer message.

The function is blocking and may raise on malformed input; the validator
runs it in a worker thread and turns exceptions into a single error.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from openapi_spec_validator import OpenAPIV30SpecValidator, OpenAPIV31SpecValidator
from openapi_spec_validator.validation.exceptions import UnresolvableParameterError

from oasbuilder.models import SpecViolation

logger = logging.getLogger(__name__)

_REQUIRED_RE = re.compile(r"^'(?P<name>[^']+)' is a required property$")


def check_full_spec(spec: dict[str, Any]) -> list[SpecViolation]:
    """Validate *spec* and return its violations, in the order found.

    Args:
        spec: A parsed OpenAPI document declaring version 3.0.x or 3.1.x.

    Returns:
        The violations; empty when the document is valid.
    """
    version = str(spec.get("openapi", ""))
    validator_cls = OpenAPIV31SpecValidator if version.startswith("3.1") else OpenAPIV30SpecValidator
    logger.debug("Checking document with %s", validator_cls.__name__)

    violations: list[SpecViolation] = []
    for error in validator_cls(spec).iter_errors():
        if isinstance(error, UnresolvableParameterError):
            continue
        path: list[str | int] = list(getattr(error, "absolute_path", []) or [])
        match = _REQUIRED_RE.match(error.message)
        if getattr(error, "validator", None) == "required" and match:
            path.append(match.group("name"))
        violations.append(SpecViolation(path=path, message=error.message))
    return violations
