from sqlalchemy import Column, DateTime, Integer, String, Text, func

from shortlinks.database import Base

CODE_MAX_LENGTH = 64


class Link(Base):
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(CODE_MAX_LENGTH), unique=True, index=True, nullable=False)
    url = Column(Text, nullable=False)
    hits = Column(Integer, nullable=False, default=0, server_default="0")
    created = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Link {self.code!r} -> {self.url!r} hits={self.hits}>"
