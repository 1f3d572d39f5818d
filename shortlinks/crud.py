import logging
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from shortlinks import errors, models

logger = logging.getLogger("shortlinks.store")


class LinkStore:
    """Owns the links table. Every operation runs in its own short-lived session."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def insert(self, code: str, url: str) -> models.Link:
        link = models.Link(code=code, url=url, hits=0)
        with self._session_factory() as db:
            db.add(link)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                # The unique index on code is the only source of truth for collisions
                if self._find(db, code) is not None:
                    raise errors.DuplicateCodeError(code)
                raise
            db.refresh(link)
        return link

    def get_by_code(self, code: str) -> models.Link | None:
        with self._session_factory() as db:
            return self._find(db, code)

    def list_all(self) -> list[models.Link]:
        with self._session_factory() as db:
            return db.query(models.Link).order_by(models.Link.id.desc()).all()

    def delete_by_code(self, code: str) -> None:
        with self._session_factory() as db:
            db.query(models.Link).filter_by(code=code).delete(synchronize_session=False)
            db.commit()

    def increment_hits(self, code: str) -> None:
        # Single UPDATE statement, so concurrent redirects never lose a hit
        with self._session_factory() as db:
            db.query(models.Link).filter_by(code=code).update(
                {models.Link.hits: models.Link.hits + 1}, synchronize_session=False
            )
            db.commit()

    def seed(self, pairs: Iterable[tuple[str, str]]) -> int:
        inserted = 0
        for code, url in pairs:
            try:
                self.insert(code, url)
            except errors.DuplicateCodeError:
                continue
            inserted += 1
        logger.info("Seeded %d link(s)", inserted)
        return inserted

    @staticmethod
    def _find(db: Session, code: str) -> models.Link | None:
        return db.query(models.Link).filter_by(code=code).first()
