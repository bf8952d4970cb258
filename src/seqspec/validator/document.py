"""Structural validation of OpenAPI 3.x documents.

:func:`validate_document` checks a single document:

* required top-level fields (``openapi``, ``info.title``, ``info.version``,
  ``paths``) and a ``3.x`` version string;
* every operation has ``responses``; status keys are 3-digit codes in
  100-599 or ``default``;
* responses and request bodies have a non-empty ``content`` map whose media
  types each carry a ``schema``, and every ``$ref`` inside those schemas
  resolves;
* parameters are a list and use a known ``in`` location; path parameters
  marked ``required: false`` are warned about;
* component schemas do not form ``$ref`` cycles.

:func:`validate_documents` runs the above per service and adds cross-service
checks: duplicate ``operationId`` values and services without operations.

The validators only read their input and always return a complete
:class:`~seqspec.models.ValidationResult`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

from seqspec.models import (
    DiagnosticSource,
    Severity,
    ValidationError,
    ValidationResult,
)
from seqspec.validator.references import (
    check_references,
    collect_valid_refs,
    find_circular_references,
)

OPENAPI_METHODS = ("get", "post", "put", "delete", "patch", "options", "head", "trace")
PARAMETER_LOCATIONS = ("path", "query", "header", "cookie")

# Path-item keys that are not operations.
_PATH_ITEM_FIELDS = frozenset({"$ref", "summary", "description", "parameters", "servers"})

_STATUS_CODE = re.compile(r"^\d{3}$")


def _error(
    message: str, context: Optional[str] = None, suggestion: Optional[str] = None
) -> ValidationError:
    return ValidationError(
        source=DiagnosticSource.OPENAPI,
        severity=Severity.ERROR,
        message=message,
        context=context,
        suggestion=suggestion,
    )


def _warning(
    message: str, context: Optional[str] = None, suggestion: Optional[str] = None
) -> ValidationError:
    return ValidationError(
        source=DiagnosticSource.OPENAPI,
        severity=Severity.WARNING,
        message=message,
        context=context,
        suggestion=suggestion,
    )


def validate_document(document: Any) -> ValidationResult:
    """Validate a single OpenAPI document.

    Args:
        document: The parsed document (normally a dict).

    Returns:
        All errors and warnings found.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    if not isinstance(document, Mapping):
        errors.append(
            _error(
                "OpenAPI document must be a mapping",
                context=type(document).__name__,
                suggestion="Provide a valid OpenAPI specification object",
            )
        )
        return ValidationResult.from_issues(errors, warnings)

    document = dict(document)
    errors.extend(_check_required_fields(document))
    errors.extend(_check_version(document))

    paths = document.get("paths")
    if isinstance(paths, Mapping):
        valid_refs = collect_valid_refs(document)
        for path, path_item in paths.items():
            if isinstance(path_item, Mapping):
                _check_path_item(str(path), path_item, valid_refs, errors, warnings)

    if isinstance(document.get("components"), Mapping):
        errors.extend(find_circular_references(document))

    return ValidationResult.from_issues(errors, warnings)


def validate_documents(documents: Mapping[str, Any]) -> ValidationResult:
    """Validate a map of service name to OpenAPI document.

    Each document's diagnostics get the service name prepended to their
    ``context``. Additionally, an ``operationId`` used by more than one
    service is an error, and a service with no operations is a warning.

    Args:
        documents: Output of :func:`~seqspec.generator.openapi.generate_specs`
            or any equivalent mapping.

    Returns:
        The combined result.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []
    owners: dict[str, list[str]] = {}

    for service, document in documents.items():
        result = validate_document(document)
        errors.extend(_with_service(issue, service) for issue in result.errors)
        warnings.extend(_with_service(issue, service) for issue in result.warnings)

        if not isinstance(document, Mapping) or not isinstance(document.get("paths"), Mapping):
            continue

        for operation in _operations(document["paths"]):
            operation_id = operation.get("operationId")
            if isinstance(operation_id, str) and operation_id:
                services = owners.setdefault(operation_id, [])
                if service not in services:
                    services.append(service)

        if not _has_method_keys(document["paths"]):
            warnings.append(
                _warning(
                    f'Service "{service}" has no operations defined',
                    context=service,
                    suggestion="Add at least one operation to the service",
                )
            )

    for operation_id, services in owners.items():
        if len(services) > 1:
            errors.append(
                _error(
                    f'Duplicate operationId "{operation_id}" found in multiple services',
                    context=" and ".join(services),
                    suggestion="Operation IDs must be unique across all services",
                )
            )

    return ValidationResult.from_issues(errors, warnings)


def validate_openapi(data: Any) -> ValidationResult:
    """Validate either one document or a service map.

    A mapping with an ``openapi`` key is treated as a single document; any
    other mapping as ``{service: document}``.
    """
    if isinstance(data, Mapping) and "openapi" not in data:
        return validate_documents(data)
    return validate_document(data)


def _with_service(issue: ValidationError, service: str) -> ValidationError:
    context = f"{service}: {issue.context}" if issue.context else service
    return issue.model_copy(update={"context": context})


def _operations(paths: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    operations: list[Mapping[str, Any]] = []
    for path_item in paths.values():
        if not isinstance(path_item, Mapping):
            continue
        for method in OPENAPI_METHODS:
            operation = path_item.get(method)
            if isinstance(operation, Mapping):
                operations.append(operation)
    return operations


def _has_method_keys(paths: Mapping[str, Any]) -> bool:
    return any(
        method in path_item
        for path_item in paths.values()
        if isinstance(path_item, Mapping)
        for method in OPENAPI_METHODS
    )


def _check_required_fields(document: dict[str, Any]) -> list[ValidationError]:
    errors: list[ValidationError] = []

    if not document.get("openapi"):
        errors.append(
            _error(
                'Missing required field: "openapi"',
                suggestion='Add the "openapi" field with version "3.0.0" or higher',
            )
        )

    info = document.get("info")
    if not isinstance(info, Mapping):
        errors.append(
            _error(
                'Missing required field: "info"',
                suggestion='Add an "info" object with title and version',
            )
        )
    else:
        if not info.get("title"):
            errors.append(
                _error('Missing required field: "info.title"', suggestion="Add a title to the info object")
            )
        if not info.get("version"):
            errors.append(
                _error(
                    'Missing required field: "info.version"',
                    suggestion="Add a version to the info object",
                )
            )

    if document.get("paths") is None:
        errors.append(
            _error(
                'Missing required field: "paths"',
                suggestion='Add a "paths" object defining your API endpoints',
            )
        )

    return errors


def _check_version(document: dict[str, Any]) -> list[ValidationError]:
    version = document.get("openapi")
    if not version:
        return []
    if not isinstance(version, str):
        return [
            _error(
                'Invalid "openapi" field type',
                context=type(version).__name__,
                suggestion='The "openapi" field must be a string',
            )
        ]
    if not version.startswith("3."):
        return [
            _error(
                f'Unsupported OpenAPI version: "{version}"',
                suggestion='Use OpenAPI 3.0.x (e.g., "3.0.0")',
            )
        ]
    return []


def _check_path_item(
    path: str,
    path_item: Mapping[str, Any],
    valid_refs: set[str],
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    for key, operation in path_item.items():
        method = str(key)
        if method not in OPENAPI_METHODS:
            if method not in _PATH_ITEM_FIELDS and not method.startswith("x-"):
                errors.append(
                    _error(
                        f'Invalid HTTP method: "{method}"',
                        context=path,
                        suggestion=f"Use one of: {', '.join(OPENAPI_METHODS)}",
                    )
                )
            continue

        if not isinstance(operation, Mapping):
            continue

        where = f"{path} ({method})"
        responses = operation.get("responses")
        if responses is None:
            errors.append(
                _error(
                    'Operation missing "responses" field',
                    context=where,
                    suggestion='Add a "responses" object with at least one response',
                )
            )
        elif not isinstance(responses, Mapping):
            errors.append(_error('"responses" must be a mapping of status codes', context=where))
        else:
            _check_responses(responses, where, valid_refs, errors)

        request_body = operation.get("requestBody")
        if isinstance(request_body, Mapping) and "$ref" not in request_body:
            errors.extend(
                _check_content(request_body.get("content"), f"{where} - request body", valid_refs, "Request body")
            )

        if "parameters" in operation:
            _check_parameters(operation["parameters"], where, errors, warnings)


def _check_responses(
    responses: Mapping[Any, Any],
    where: str,
    valid_refs: set[str],
    errors: list[ValidationError],
) -> None:
    for key, response in responses.items():
        # YAML loads unquoted status codes as integers.
        status = str(key)
        if status != "default" and (
            not _STATUS_CODE.match(status) or not 100 <= int(status) <= 599
        ):
            errors.append(
                _error(
                    f'Invalid status code: "{status}"',
                    context=where,
                    suggestion='Use a 3-digit status code between 100 and 599, or "default"',
                )
            )

        if not isinstance(response, Mapping):
            continue
        if "$ref" in response:
            errors.extend(check_references(response, valid_refs, f"{where} - {status}"))
            continue
        errors.extend(
            _check_content(response.get("content"), f"{where} - {status}", valid_refs, "Response")
        )


def _check_content(
    content: Any, where: str, valid_refs: set[str], owner: str
) -> list[ValidationError]:
    """Check a ``content`` map of media type objects."""
    if not isinstance(content, Mapping) or not content:
        return [
            _error(
                f'{owner} missing "content" field',
                context=where,
                suggestion='Add a "content" object with at least one media type',
            )
        ]

    errors: list[ValidationError] = []
    for media_type, media_object in content.items():
        if not isinstance(media_object, Mapping):
            continue
        schema = media_object.get("schema")
        if not schema:
            errors.append(
                _error(
                    f'Media type "{media_type}" missing "schema" field',
                    context=where,
                    suggestion='Add a "schema" object defining the data structure',
                )
            )
        else:
            errors.extend(check_references(schema, valid_refs, where))
    return errors


def _check_parameters(
    parameters: Any,
    where: str,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    if not isinstance(parameters, list):
        errors.append(
            _error("Parameters must be an array", context=where, suggestion="Convert parameters to an array")
        )
        return

    for parameter in parameters:
        if not isinstance(parameter, Mapping):
            continue
        location = parameter.get("in")
        if location and location not in PARAMETER_LOCATIONS:
            errors.append(
                _error(
                    f'Invalid parameter location: "{location}"',
                    context=where,
                    suggestion=f"Use one of: {', '.join(PARAMETER_LOCATIONS)}",
                )
            )
        if location == "path" and parameter.get("required") is False:
            warnings.append(
                _warning(
                    f'Path parameter "{parameter.get("name")}" is not marked as required',
                    context=where,
                    suggestion="Path parameters must be marked as required: true",
                )
            )
