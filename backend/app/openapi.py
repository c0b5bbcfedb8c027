"""
Product API Backend: OpenAPI Document Builder
==============================================

What:  Builds the published API description from the documentation metadata
       attached to each route definition.
Why:   The route table is the single source of truth: the same records that
       wire the dispatcher also produce /openapi.json and the Swagger UI at
       /docs. Nothing is written twice.
How:   build_openapi_document() walks the route definitions once, checks the
       metadata and assembles an OpenAPI 3.0 dict. main.create_app() stores
       the result on the FastAPI app, which serves it unchanged.
When:  Once, while the app object is created. Any DocumentationError aborts
       app creation, so a server with a broken route table never starts.

Metadata Checks:
    - summary present, at least one documented response
    - status codes are HTTP status codes (100-599)
    - every {param} in the path template has a documented path parameter
    - every tag used by an operation is declared
    - every $ref points at a schema in components
    - no (method, path) pair is documented twice
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from app.exceptions import DocumentationError

OPENAPI_VERSION = "3.0.2"

SCHEMA_REF_PREFIX = "#/components/schemas/"

_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "head", "options"}
_PATH_PARAM_RE = re.compile(r"{([^{}/]+)}")


def schema_ref(name: str) -> Dict[str, str]:
    return {"$ref": SCHEMA_REF_PREFIX + name}


# ══════════════════════════════════════════════════════════════════════════
# Route Documentation Metadata
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ParamDoc:
    """A documented path parameter. Has no effect on runtime validation."""
    name: str
    description: str
    schema_type: str = "integer"
    required: bool = True

    def to_openapi(self) -> Dict[str, Any]:
        return {
            "in": "path",
            "name": self.name,
            "description": self.description,
            "required": self.required,
            "schema": {"type": self.schema_type},
        }


@dataclass(frozen=True)
class ResponseDoc:
    """A documented response; `schema` is the JSON body schema, if any."""
    description: str
    schema: Optional[Mapping[str, Any]] = None

    def to_openapi(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"description": self.description}
        if self.schema is not None:
            doc["content"] = {"application/json": {"schema": copy.deepcopy(dict(self.schema))}}
        return doc


@dataclass(frozen=True)
class RouteDoc:
    """Documentation metadata carried by a route definition."""
    summary: str
    responses: Mapping[int, ResponseDoc]
    description: str = ""
    tags: Tuple[str, ...] = ("Products",)
    parameters: Tuple[ParamDoc, ...] = ()
    request_body: Optional[Mapping[str, Any]] = None


# ══════════════════════════════════════════════════════════════════════════
# Document Builder
# ══════════════════════════════════════════════════════════════════════════


def _iter_refs(node: Any) -> Iterator[str]:
    """Yields every $ref value found anywhere inside a JSON schema fragment."""
    if isinstance(node, Mapping):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield value
            else:
                yield from _iter_refs(value)
    elif isinstance(node, (list, tuple)):
        for item in node:
            yield from _iter_refs(item)


def _check_refs(fragment: Any, schemas: Mapping[str, Any], label: str) -> None:
    for ref in _iter_refs(fragment):
        name = ref[len(SCHEMA_REF_PREFIX):] if ref.startswith(SCHEMA_REF_PREFIX) else None
        if name is None or name not in schemas:
            raise DocumentationError(f"unresolvable schema reference '{ref}'", route=label)


def _build_operation(
    route: Any,
    full_path: str,
    label: str,
    schemas: Mapping[str, Any],
    declared_tags: Sequence[str],
) -> Dict[str, Any]:
    doc: Optional[RouteDoc] = getattr(route, "doc", None)
    if doc is None:
        raise DocumentationError("route has no documentation metadata", route=label)
    if not doc.summary or not doc.summary.strip():
        raise DocumentationError("summary is required", route=label)
    if not doc.responses:
        raise DocumentationError("at least one response must be documented", route=label)

    for tag in doc.tags:
        if tag not in declared_tags:
            raise DocumentationError(f"undeclared tag '{tag}'", route=label)

    template_params = set(_PATH_PARAM_RE.findall(full_path))
    documented_params = {p.name for p in doc.parameters}
    missing = sorted(template_params - documented_params)
    if missing:
        raise DocumentationError(
            f"path parameters not documented: {', '.join(missing)}", route=label
        )
    unknown = sorted(documented_params - template_params)
    if unknown:
        raise DocumentationError(
            f"documented parameters not in path: {', '.join(unknown)}", route=label
        )

    operation: Dict[str, Any] = {
        "summary": doc.summary,
        "tags": list(doc.tags),
        "operationId": route.name,
    }
    if doc.description:
        operation["description"] = doc.description
    if doc.parameters:
        operation["parameters"] = [p.to_openapi() for p in doc.parameters]
    if doc.request_body is not None:
        _check_refs(doc.request_body, schemas, label)
        operation["requestBody"] = {
            "required": True,
            "content": {
                "application/json": {"schema": copy.deepcopy(dict(doc.request_body))}
            },
        }

    for status_code in doc.responses:
        if (
            not isinstance(status_code, int)
            or isinstance(status_code, bool)
            or not 100 <= status_code <= 599
        ):
            raise DocumentationError(f"invalid status code {status_code!r}", route=label)

    responses: Dict[str, Any] = {}
    for status_code in sorted(doc.responses):
        response = doc.responses[status_code]
        if response.schema is not None:
            _check_refs(response.schema, schemas, label)
        responses[str(status_code)] = response.to_openapi()
    operation["responses"] = responses
    return operation


def build_openapi_document(
    routes: Iterable[Any],
    *,
    prefix: str,
    title: str,
    version: str,
    description: str = "",
    tags: Sequence[Mapping[str, str]] = (),
    schemas: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Assemble the OpenAPI document for a route table.

    Args:
        routes:      Route definitions (method, path, name, doc), in table order
        prefix:      Mount prefix prepended to every route path
        title / version / description: the `info` object
        tags:        Declared tags, e.g. [{"name": "Products", "description": ...}]
        schemas:     Named component schemas ($ref targets)

    Returns:
        A plain dict ready to be served as JSON. Built once; callers must
        treat it as read-only.

    Raises:
        DocumentationError: the metadata of some route is malformed
    """
    components = {name: copy.deepcopy(dict(schema)) for name, schema in (schemas or {}).items()}
    for name, schema in components.items():
        _check_refs(schema, components, f"schema {name}")

    declared_tags: List[str] = [tag["name"] for tag in tags]

    paths: Dict[str, Dict[str, Any]] = {}
    for route in routes:
        full_path = prefix + route.path
        method = route.method.lower()
        label = f"{route.method.upper()} {full_path}"
        if method not in _HTTP_METHODS:
            raise DocumentationError(f"unsupported HTTP method '{route.method}'", route=label)

        operations = paths.setdefault(full_path, {})
        if method in operations:
            raise DocumentationError("route documented twice", route=label)
        operations[method] = _build_operation(route, full_path, label, components, declared_tags)

    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": title, "version": version, "description": description},
        "tags": [dict(tag) for tag in tags],
        "paths": paths,
        "components": {"schemas": components},
    }
