"""
URI Router - Maps resource URIs onto Postman API endpoints.

Resource URIs look like ``postman://segment[/segment]*``. Two routers cover
them:

- DirectResourceRouter: exactly one segment (``postman://workspaces``),
  matched against a fixed allow-set.
- TemplatedResourceRouter: two to five segments
  (``postman://apis/{apiId}/versions/{versionId}``), matched positionally
  against ResourceTemplates in registration order. The first full match wins.

A trailing placeholder may be marked optional (``{versionId?}``); the endpoint
builder then receives the variable only when the URI supplied it, which lets
one template select a longer or shorter endpoint path.

Resolution is pure: no I/O, no state changes. Reading the routed endpoint is
the caller's job.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote, unquote

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "postman"
DEFAULT_MIME_TYPE = "application/json"
MAX_TEMPLATE_SEGMENTS = 5

EndpointBuilder = Callable[[Mapping[str, str]], str]


class RouteFailure(LookupError):
    """No direct resource or template matches the URI."""

    def __init__(self, uri: str, reason: str):
        super().__init__(f"{reason}: {uri}")
        self.uri = uri
        self.reason = reason


# ============================================================================
# Parsing
# ============================================================================

def parse_resource_uri(uri: str, scheme: str = DEFAULT_SCHEME) -> List[str]:
    """Split a resource URI into its decoded path segments.

    Args:
        uri: URI such as ``postman://workspaces/123/collections``
        scheme: Expected URI scheme

    Returns:
        List of path segments after ``scheme://``

    Raises:
        RouteFailure: If the scheme is wrong or a segment is empty
    """
    prefix = f"{scheme}://"
    if not isinstance(uri, str) or not uri.startswith(prefix):
        raise RouteFailure(str(uri), f"Invalid resource URI, expected {prefix}...")

    path = uri[len(prefix):]
    # Query strings and fragments are not part of the resource address
    for separator in ("?", "#"):
        path = path.split(separator, 1)[0]

    segments = path.split("/")
    if path.endswith("/"):
        segments = segments[:-1]
    if not segments or any(segment == "" for segment in segments):
        raise RouteFailure(uri, "Invalid resource URI, empty path segment")

    return [unquote(segment) for segment in segments]


def encode_segment(value: str) -> str:
    """Percent-encode one captured variable for use in an endpoint path."""
    return quote(str(value), safe="")


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class _Placeholder:
    name: str
    optional: bool = False


Segment = Union[str, _Placeholder]


def _parse_template(uri_template: str, scheme: str) -> Tuple[Segment, ...]:
    prefix = f"{scheme}://"
    if not uri_template.startswith(prefix):
        raise ValueError(f"Template must start with {prefix}: {uri_template}")

    raw_segments = uri_template[len(prefix):].split("/")
    segments: List[Segment] = []
    for index, raw in enumerate(raw_segments):
        if raw.startswith("{") and raw.endswith("}"):
            name = raw[1:-1]
            optional = name.endswith("?")
            if optional:
                name = name[:-1]
                if index != len(raw_segments) - 1:
                    raise ValueError(
                        f"Only the last placeholder may be optional: {uri_template}"
                    )
            if not name:
                raise ValueError(f"Empty placeholder in template: {uri_template}")
            segments.append(_Placeholder(name, optional))
        elif raw:
            segments.append(raw)
        else:
            raise ValueError(f"Empty segment in template: {uri_template}")

    if not 2 <= len(segments) <= MAX_TEMPLATE_SEGMENTS:
        raise ValueError(
            f"Templates need 2-{MAX_TEMPLATE_SEGMENTS} segments: {uri_template}"
        )
    return tuple(segments)


@dataclass(frozen=True)
class ResourceTemplate:
    """A parameterized resource and the endpoint it reads from.

    The URI template uses ``{name}`` placeholders as the MCP resource
    template listing expects; ``{name?}`` marks an optional trailing segment.
    """
    uri_template: str
    endpoint_builder: EndpointBuilder
    name: str
    description: str = ""
    mime_type: str = DEFAULT_MIME_TYPE
    headers: Optional[Mapping[str, str]] = None
    scheme: str = DEFAULT_SCHEME
    segments: Tuple[Segment, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "segments", _parse_template(self.uri_template, self.scheme))

    @property
    def advertised_uri_template(self) -> str:
        """URI template as RFC 6570 clients expect it (no ``?`` markers)."""
        return self.uri_template.replace("?}", "}")

    def match(self, segments: Sequence[str]) -> Optional[Dict[str, str]]:
        """Match decoded URI segments positionally.

        Returns:
            Captured variables, or None if the template does not match
        """
        pattern = self.segments
        has_optional = isinstance(pattern[-1], _Placeholder) and pattern[-1].optional
        min_length = len(pattern) - 1 if has_optional else len(pattern)
        if not min_length <= len(segments) <= len(pattern):
            return None

        variables: Dict[str, str] = {}
        for expected, actual in zip(pattern, segments):
            if isinstance(expected, _Placeholder):
                variables[expected.name] = actual
            elif expected != actual:
                return None
        return variables


@dataclass(frozen=True)
class DirectResource:
    """A fixed, unparameterized resource such as ``postman://workspaces``."""
    name: str
    endpoint: str
    title: str
    description: str = ""
    mime_type: str = DEFAULT_MIME_TYPE
    headers: Optional[Mapping[str, str]] = None
    scheme: str = DEFAULT_SCHEME

    @property
    def uri(self) -> str:
        return f"{self.scheme}://{self.name}"


@dataclass(frozen=True)
class ResolvedRoute:
    """Outcome of a successful resolve()."""
    uri: str
    endpoint: str
    variables: Mapping[str, str]
    mime_type: str = DEFAULT_MIME_TYPE
    headers: Optional[Mapping[str, str]] = None
    template: Optional[str] = None


# ============================================================================
# Routers
# ============================================================================

class DirectResourceRouter:
    """Routes single-segment URIs against a fixed allow-set."""

    def __init__(self, resources: Sequence[DirectResource] = (), scheme: str = DEFAULT_SCHEME):
        self.scheme = scheme
        self._resources: Dict[str, DirectResource] = {}
        for resource in resources:
            self.add(resource)

    def add(self, resource: DirectResource) -> None:
        if resource.name in self._resources:
            raise ValueError(f"Direct resource '{resource.name}' already registered")
        self._resources[resource.name] = resource

    @property
    def resources(self) -> List[DirectResource]:
        return list(self._resources.values())

    def resolve(self, uri: str) -> ResolvedRoute:
        segments = parse_resource_uri(uri, self.scheme)
        if len(segments) != 1:
            raise RouteFailure(uri, "Direct resources take exactly one segment")
        return self._resolve_segment(uri, segments[0])

    def _resolve_segment(self, uri: str, resource_type: str) -> ResolvedRoute:
        resource = self._resources.get(resource_type)
        if resource is None:
            raise RouteFailure(uri, f"Unknown resource type '{resource_type}'")
        return ResolvedRoute(
            uri=uri,
            endpoint=resource.endpoint,
            variables={},
            mime_type=resource.mime_type,
            headers=resource.headers,
        )


class TemplatedResourceRouter:
    """Routes multi-segment URIs against templates in registration order."""

    def __init__(self, templates: Sequence[ResourceTemplate] = (), scheme: str = DEFAULT_SCHEME):
        self.scheme = scheme
        self._templates: List[ResourceTemplate] = []
        for template in templates:
            self.add(template)

    def add(self, template: ResourceTemplate) -> None:
        # Overlapping templates are allowed; earlier registrations shadow later ones
        self._templates.append(template)

    @property
    def templates(self) -> List[ResourceTemplate]:
        return list(self._templates)

    def resolve(self, uri: str) -> ResolvedRoute:
        segments = parse_resource_uri(uri, self.scheme)
        return self._resolve_segments(uri, segments)

    def _resolve_segments(self, uri: str, segments: Sequence[str]) -> ResolvedRoute:
        for template in self._templates:
            variables = template.match(segments)
            if variables is None:
                continue
            endpoint = template.endpoint_builder(
                {name: encode_segment(value) for name, value in variables.items()}
            )
            logger.debug(f"Resolved {uri} via {template.uri_template} -> {endpoint}")
            return ResolvedRoute(
                uri=uri,
                endpoint=endpoint,
                variables=variables,
                mime_type=template.mime_type,
                headers=template.headers,
                template=template.uri_template,
            )
        raise RouteFailure(uri, "No resource template matches")


class ResourceRouter:
    """Front router: one segment goes direct, longer URIs go through templates."""

    def __init__(
        self,
        direct: DirectResourceRouter,
        templated: TemplatedResourceRouter,
        scheme: str = DEFAULT_SCHEME,
    ):
        self.scheme = scheme
        self.direct = direct
        self.templated = templated

    def resolve(self, uri: str) -> ResolvedRoute:
        """Resolve a resource URI to an upstream endpoint.

        Raises:
            RouteFailure: If the URI is malformed or nothing matches
        """
        segments = parse_resource_uri(uri, self.scheme)
        if len(segments) == 1:
            return self.direct._resolve_segment(uri, segments[0])
        return self.templated._resolve_segments(uri, segments)
