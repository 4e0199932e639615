"""Client for The Metropolitan Museum of Art Collection API.

API documentation: https://metmuseum.github.io
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

import requests

from .errors import DecodeError, StatusError, TransportError
from .models import DepartmentsResult, ObjectResult, ObjectsResult
from .options import ObjectOptions, ObjectsOptions, SearchOptions, encode_query

DEFAULT_ROOT_URL = "https://collectionapi.metmuseum.org/public/collection/v1/"


@dataclass(frozen=True)
class ClientConfig:
    """
    Transport settings shared by every request a MetClient makes.

    ``session`` lets callers control pooling, proxies and retries with their
    own ``requests.Session``; without one, ``requests.get`` is used. The
    client sets no timeout unless ``timeout`` is given.
    """

    root_url: str = DEFAULT_ROOT_URL
    session: requests.Session | None = None
    timeout: float | tuple[float, float] | None = None
    verify: bool = True  # False bypasses TLS verification
    # Read-only after construction; left out of the hash
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.root_url.endswith("/"):
            object.__setattr__(self, "root_url", self.root_url + "/")
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


class MetClient:
    """
    Typed access to the four read-only collection endpoints.

    Each call makes exactly one GET request and either returns a decoded
    result or raises a MetAPIError subclass. Nothing is retried or cached.
    """

    name = "The Metropolitan Museum of Art"
    short_name = "MET"

    # Logging callback - set by app to integrate with UI logging
    _log_callback: Callable[[str, str], None] | None = None

    def __init__(self, config: ClientConfig | None = None) -> None:
        self.config = config or ClientConfig()

    @classmethod
    def with_session(cls, session: requests.Session, **kwargs: Any) -> MetClient:
        """Build a client around an existing session."""
        return cls(ClientConfig(session=session, **kwargs))

    def set_logger(self, callback: Callable[[str, str], None]) -> None:
        """Set logging callback. Signature: callback(level, message)."""
        self._log_callback = callback

    def _log(self, level: str, message: str) -> None:
        if self._log_callback:
            self._log_callback(level, f"[{self.short_name}] {message}")

    def _log_info(self, message: str) -> None:
        self._log("INFO", message)

    # -- endpoints ---------------------------------------------------------

    def objects(self, options: ObjectsOptions | None = None) -> ObjectsResult:
        """
        List the IDs of all public objects, optionally restricted to objects
        updated since ``metadata_date`` and/or to some departments.
        """
        options = options or ObjectsOptions()
        result = ObjectsResult.from_dict(self._get_json("objects", options.to_params()))
        self._log_info(f"Received {len(result.object_ids)} object IDs (total={result.total})")
        return result

    def get_object(self, options: ObjectOptions) -> ObjectResult:
        """Fetch the full record for one object. Unknown IDs raise StatusError (404)."""
        result = ObjectResult.from_dict(self._get_json(options.path))
        self._log_info(f"Received object {result.object_id}: {result.title or 'Untitled'}")
        return result

    def departments(self) -> DepartmentsResult:
        result = DepartmentsResult.from_dict(self._get_json("departments"))
        self._log_info(f"Received {len(result.departments)} departments")
        return result

    def search(self, options: SearchOptions) -> ObjectsResult:
        """
        Search object IDs by free text and filters.

        Raises ValidationError, without touching the network, when only one
        side of the year range is set.
        """
        options.validate()
        result = ObjectsResult.from_dict(self._get_json("search", options.to_params()))
        self._log_info(f"Search '{options.q}' matched {result.total} objects")
        return result

    # -- transport ---------------------------------------------------------

    def build_url(self, path: str, params: dict[str, str] | None = None) -> str:
        """Resolve an endpoint path and its query parameters against the root URL."""
        url = self.config.root_url + path
        if params:
            url = f"{url}?{encode_query(params)}"
        return url

    def _get(self, path: str, params: dict[str, str] | None = None) -> requests.Response:
        url = self.build_url(path, params)
        config = self.config
        get = config.session.get if config.session is not None else requests.get

        self._log_info(f"GET {url} (timeout={config.timeout}, verify={config.verify})")

        try:
            response = get(
                url,
                headers=dict(config.headers) or None,
                timeout=config.timeout,
                verify=config.verify,
            )
        except requests.RequestException as e:
            raise TransportError(f"Error communicating with {self.name}: {e}") from e

        if response.status_code != 200:
            raise StatusError(response.status_code, url)
        return response

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        response = self._get(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response from '{path}' is not valid JSON: {e}") from e


_default_client: MetClient | None = None


def default_client() -> MetClient:
    """Return the shared client used by the module-level functions."""
    global _default_client
    if _default_client is None:
        _default_client = MetClient()
    return _default_client


def objects(options: ObjectsOptions | None = None) -> ObjectsResult:
    return default_client().objects(options)


def get_object(options: ObjectOptions) -> ObjectResult:
    return default_client().get_object(options)


def departments() -> DepartmentsResult:
    return default_client().departments()


def search(options: SearchOptions) -> ObjectsResult:
    return default_client().search(options)
