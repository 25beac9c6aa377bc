class FetchError(Exception):
    def __init__(
        self,
        message: str,
        url: str,
        label: str = "fetch",
        status_code: int | None = None,
    ):
        self.message = message
        self.url = url
        self.label = label
        self.status_code = status_code
        super().__init__(f"{label}: {message}")


class InputFileError(Exception):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Input file not found: {path}")
