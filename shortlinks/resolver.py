from shortlinks import errors
from shortlinks.crud import LinkStore


class Resolver:
    def __init__(self, store: LinkStore):
        self.store = store

    def resolve(self, code: str) -> str:
        """Return the destination for ``code`` and record one hit.

        Raises errors.NotFound for unknown codes. The increment is a no-op if the
        link is deleted between the lookup and the update.
        """
        link = self.store.get_by_code(code)
        if link is None:
            raise errors.NotFound(code)
        self.store.increment_hits(code)
        return link.url
