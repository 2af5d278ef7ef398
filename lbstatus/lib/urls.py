"""Expansion of service URL templates into health-check URLs."""

PING_ENDPOINT = "/ping"


def expand(template: str, environment: str) -> str:
    """Fill in ``$tld``, ``$svc_domain`` and ``$domain`` for an environment.

    Unknown placeholders are left as they are. The ping path is appended.
    """
    tld = "com" if environment == "testing" else "io"
    # $service.testing.lookback.com, ...
    domain = "lookback" if environment == "production" else f"{environment}.lookback"
    # $service.svc.testing.lookback.com, ...
    svc_domain = f"svc.{environment}.lookback"

    url = (
        template
        .replace("$tld", tld)
        .replace("$svc_domain", svc_domain)
        .replace("$domain", domain)
    )
    return url + PING_ENDPOINT
