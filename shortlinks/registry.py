import logging
import re

from shortlinks import errors, models
from shortlinks.codes import CodeGenerator
from shortlinks.crud import LinkStore

logger = logging.getLogger("shortlinks.registry")

SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
# Codes are a single path segment: /{code} and /api/links/{code} must match them
CODE_RE = re.compile(rf"[A-Za-z0-9_-]{{1,{models.CODE_MAX_LENGTH}}}")


def normalize_url(raw_url: str | None) -> str:
    url = (raw_url or "").strip()
    if not url:
        raise errors.ValidationError("url is required")
    if not SCHEME_RE.match(url):
        url = "https://" + url
    return url


def check_code(raw_code: str) -> str:
    if not CODE_RE.fullmatch(raw_code):
        raise errors.ValidationError(
            f"code must be 1-{models.CODE_MAX_LENGTH} letters, digits, '-' or '_'"
        )
    return raw_code


class Registry:
    def __init__(self, store: LinkStore, generator: CodeGenerator | None = None, code_attempts: int = 3):
        self.store = store
        self.generator = generator or CodeGenerator()
        self.code_attempts = max(1, code_attempts)

    def create(self, raw_url: str | None, raw_code: str | None = None) -> models.Link:
        url = normalize_url(raw_url)

        if raw_code:
            # Caller picked the code: a collision is theirs to resolve
            code = check_code(raw_code)
            try:
                link = self.store.insert(code, url)
            except errors.DuplicateCodeError:
                logger.info("Code already taken: %s", raw_code)
                raise
        else:
            link = self._insert_generated(url)

        logger.info("Created link %s -> %s", link.code, link.url)
        return link

    def _insert_generated(self, url: str) -> models.Link:
        collision = None
        for attempt in range(1, self.code_attempts + 1):
            code = self.generator.generate()
            try:
                return self.store.insert(code, url)
            except errors.DuplicateCodeError as exc:
                logger.warning("Generated code %s collided (attempt %d/%d)", code, attempt, self.code_attempts)
                collision = exc
        raise collision

    def list(self) -> list[models.Link]:
        return self.store.list_all()

    def delete(self, code: str) -> None:
        self.store.delete_by_code(code)
        logger.info("Deleted link %s", code)
