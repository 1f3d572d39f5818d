import secrets


class CodeGenerator:
    """Random hex codes, e.g. "a3f9c1" for the default 3 bytes."""

    def __init__(self, nbytes: int = 3):
        if nbytes < 1:
            raise ValueError("nbytes must be at least 1")
        self.nbytes = nbytes

    def generate(self) -> str:
        return secrets.token_hex(self.nbytes)
