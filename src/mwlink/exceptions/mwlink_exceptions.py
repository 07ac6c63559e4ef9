class ApiError(RuntimeError):
    """api.php answered with an error object."""

    def __init__(self, code, info, url=None):
        super().__init__(f"{code}: {info} [fetching {url}]")
        self.code = code
        self.info = info
        self.url = url


class SiteInfoError(Exception):
    pass
