"""GitHub web link helpers"""

import re
from typing import Optional
from urllib.parse import quote, urlparse

KNOWN_HOSTS = ("github.com",)

# <user>@<host>:<owner>/<repo>[.git]
_SSH_REMOTE = re.compile(r"^[^@\s/]+@(?P<host>[^:\s/]+):(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+)$")


def _strip_git_suffix(name: str) -> str:
    if name.endswith(".git"):
        return name[:-4]
    return name


def derive_compare_url(remote_url: str) -> Optional[str]:
    """Derive the web URL of a repository from its remote URL.

    Recognizes the SSH form (git@github.com:org/repo.git) and the HTTPS form
    (https://github.com/org/repo.git) for known hosts. Anything else yields
    None, meaning no link is available for this remote.
    """
    if not remote_url:
        return None
    remote_url = remote_url.strip()

    match = _SSH_REMOTE.match(remote_url)
    if match:
        host = match.group("host").lower()
        if host not in KNOWN_HOSTS:
            return None
        repo = _strip_git_suffix(match.group("repo"))
        if not repo:
            return None
        return f"https://{host}/{match.group('owner')}/{repo}"

    parsed = urlparse(remote_url)
    if parsed.scheme != "https" or parsed.netloc.lower() not in KNOWN_HOSTS:
        return None
    if parsed.query or parsed.fragment:
        return None

    parts = parsed.path.strip("/").split("/")
    if len(parts) != 2 or not all(parts):
        return None

    owner, repo = parts[0], _strip_git_suffix(parts[1])
    if not repo:
        return None
    return f"https://{parsed.netloc.lower()}/{owner}/{repo}"


def compare_url_for_branch(base_url: str, branch: str, base_branch: Optional[str] = None) -> str:
    """Build the compare page link for a branch.

    Args:
        base_url: Web URL of the repository (see derive_compare_url)
        branch: Branch to compare
        base_branch: Branch to compare against (the host's default if None)
    """
    head = quote(branch, safe="/")
    if base_branch:
        return f"{base_url}/compare/{quote(base_branch, safe='/')}...{head}"
    return f"{base_url}/compare/{head}"
