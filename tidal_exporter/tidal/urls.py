"""
URL normalization for the TIDAL Open API.

Links handed back by the API ("links.next" on paginated responses) are
relative and lack the version prefix. normalize_tidal_url() turns any link
into an absolute request on the trusted API host, so a malformed or foreign
"next" link can never send the bearer token anywhere else.
"""

from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit


API_SCHEME = "https"
API_HOST = "openapi.tidal.com"
API_BASE_URL = f"{API_SCHEME}://{API_HOST}"
API_VERSION_PREFIX = "/v2/"

DEFAULT_COUNTRY_CODE = "US"
DEFAULT_INCLUDE = "items"


def normalize_tidal_url(
    link: str | None,
    country_code: str = DEFAULT_COUNTRY_CODE,
    default_include: str = DEFAULT_INCLUDE,
) -> str | None:
    """
    Rewrite a relative or absolute link into a canonical TIDAL API URL.

    Args:
        link: Absolute URL, relative path ("/playlists/x") or bare fragment
              ("playlists/x").
        country_code: Value for countryCode when the link has none.
        default_include: Value for include when the link has none.

    Returns:
        The absolute URL, or None if link is empty or cannot be parsed.
        Callers treat None as "no further pages".

    Behavior:
        1. Resolve link against https://openapi.tidal.com
        2. Force scheme https and host openapi.tidal.com
        3. Prepend /v2 to the path unless it is already there
        4. Add countryCode and include only when absent (explicit values win)

    Examples:
        normalize_tidal_url("/playlists/abc/relationships/items?page[cursor]=x")
        # "https://openapi.tidal.com/v2/playlists/abc/relationships/items?page%5Bcursor%5D=x&countryCode=US&include=items"

        normalize_tidal_url("http://evil.example/v2/tracks/1?include=albums&countryCode=GB")
        # "https://openapi.tidal.com/v2/tracks/1?include=albums&countryCode=GB"
    """
    if not link or not isinstance(link, str):
        return None

    try:
        parts = urlsplit(urljoin(API_BASE_URL + "/", link))
        query = parse_qsl(parts.query, keep_blank_values=True)
    except ValueError:
        return None

    path = parts.path or "/"
    if not (path.startswith(API_VERSION_PREFIX) or path == API_VERSION_PREFIX.rstrip("/")):
        path = API_VERSION_PREFIX + path.lstrip("/")

    keys = {key for key, _ in query}
    if "countryCode" not in keys:
        query.append(("countryCode", country_code))
    if "include" not in keys:
        query.append(("include", default_include))

    return urlunsplit((API_SCHEME, API_HOST, path, urlencode(query), parts.fragment))
