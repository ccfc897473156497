"""Application-root path helpers.

Resources are registered relative to the application root; requests
arrive with server paths. ``app_path_for`` turns the former into the
latter.
"""


def canonical_path(path: str) -> str:
    """Collapse empty, ``.`` and ``..`` segments of *path*.

    Keeps a single leading slash if *path* had one and never climbs above
    the root. Trailing slashes are dropped.
    """
    parts: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    joined = "/".join(parts)
    if path.startswith("/"):
        return "/" + joined
    return joined


def app_path_for(app_root: str, path: str) -> str:
    """Return the server path for *path*, given relative to *app_root*.

    ::

        app_path_for("", "/items/:id")      -> "/items/:id"
        app_path_for("/api", "/items/:id")  -> "/api/items/:id"
        app_path_for("/api/", "items")      -> "/api/items"
    """
    root = app_root.strip("/")
    if not root:
        return canonical_path("/" + path.lstrip("/"))
    return canonical_path(f"/{root}/{path.lstrip('/')}")
