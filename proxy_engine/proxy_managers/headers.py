from typing import Dict, Iterable, Mapping, Optional
from proxy_engine.models.proxy_model import HeaderValue

FORWARDED_HEADERS = ("cookie", "dnt", "referer", "user-agent", "x-forwarded-for")

CSP_HEADER = "content-security-policy"
MIXED_CONTENT_DIRECTIVE = "block-all-mixed-content"
PATCHED_DIRECTIVES = ("img-src", "default-src", "connect-src")


def pick(headers: Mapping[str, str], keys: Iterable[str] = FORWARDED_HEADERS) -> Dict[str, str]:
    """Keeps only the allow-listed headers, matched case-insensitively."""
    lowered = {name.lower(): value for name, value in headers.items()}
    return {key: lowered[key] for key in keys if key in lowered}


def strip_mixed_content_csp(csp_header: str) -> str:
    return csp_header.replace(MIXED_CONTENT_DIRECTIVE, "", 1)


def patch_csp_value(value: str, host: Optional[str]) -> str:
    patched = strip_mixed_content_csp(value)
    if not host:
        return patched
    host_with_protocol = f"https://{host}"
    for directive in PATCHED_DIRECTIVES:
        patched = patched.replace(directive, f"{directive} {host_with_protocol}", 1)
    return patched


def patch_content_security(headers: Mapping[str, HeaderValue], host: Optional[str]) -> Dict[str, str]:
    """
    Rewrites Content-Security-Policy headers so pages keep loading images
    through this proxy. Every other header passes through untouched.
    """
    final_headers: Dict[str, str] = {}
    for name, value in headers.items():
        if isinstance(value, list):
            value = ", ".join(value)
        if CSP_HEADER in name.lower():
            final_headers[name] = patch_csp_value(value, host)
        else:
            final_headers[name] = value
    return final_headers
