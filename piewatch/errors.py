class PiewatchError(Exception):
    pass


class ConfigError(PiewatchError):
    """Required credentials or endpoints are absent. Raised before any network call."""


class UpstreamError(PiewatchError):
    def __init__(self, path: str, status: int | None = None, body: str = "", reason: str | None = None):
        self.path = path
        self.status = status
        self.body = body
        detail = reason or (f"{status}" if status is not None else "request failed")
        msg = f"API {path} -> {detail}"
        if body:
            msg += f"\n{body}"
        super().__init__(msg)


class DeliveryError(PiewatchError):
    pass
