import dataclasses
import urllib.parse
from typing import List, Mapping, Optional


@dataclasses.dataclass(frozen=True)
class Resource:
    """
    A reference to a collection of catalog objects (e.g. external locations).
    """
    prefix: str
    plural: str

    def __str__(self) -> str:
        return self.plural

    def get_url(
            self,
            *,
            server: Optional[str] = None,
            name: Optional[str] = None,
            params: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Build a URL to be used with the catalog API.

        If the name is not set, the URL for the collection is returned.
        Otherwise (if set), the URL for the individual object is returned.

        Params go to the query parameters (``?param1=value1&param2=value2...``).
        """
        parts: List[Optional[str]] = [
            self.prefix.strip('/'),
            self.plural,
            urllib.parse.quote(name, safe='') if name is not None else None,
        ]

        query = urllib.parse.urlencode(params, encoding='utf-8') if params else ''
        path = '/' + '/'.join([part for part in parts if part])
        url = path + ('?' if query else '') + query
        return url if server is None else server.rstrip('/') + '/' + url.lstrip('/')


EXTERNAL_LOCATIONS = Resource('/api/2.1/unity-catalog', 'external-locations')
