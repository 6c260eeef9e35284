from __future__ import annotations
import secrets
import time

def _tok(nbytes: int = 6) -> str:
    return secrets.token_urlsafe(nbytes)

def new_layer_id(kind: str) -> str:
    """Type prefix + millisecond timestamp + random token, e.g. `image-1718000000000-Xy3k9Q`."""
    return f"{kind}-{int(time.time() * 1000)}-{_tok()}"

def new_job_id() -> str:
    return f"job_{_tok(9)}"
