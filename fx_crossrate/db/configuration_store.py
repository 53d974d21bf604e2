"""SQLite persistence for direct rate configurations (via SQLAlchemy)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, cast

from sqlalchemy import Column, DateTime, Integer, String, create_engine, delete, select, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from fx_crossrate.core.models import DirectRate, RateTuple
from fx_crossrate.utils.logger import get_logger

if TYPE_CHECKING:  # pragma: no cover - type checker helper
    from sqlalchemy.engine import Engine

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class _DirectRateRow(Base):
    __tablename__ = "direct_rates"

    position = Column(Integer, primary_key=True)
    from_currency = Column(String(3), nullable=False)
    to_currency = Column(String(3), nullable=False)
    # Text keeps the exact Decimal representation; SQLite NUMERIC is a float.
    rate = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=text("CURRENT_TIMESTAMP"))


@dataclass(slots=True)
class PersistenceResult:
    """Represents how many rows a save replaced."""

    inserted: int = 0
    deleted: int = 0

    @property
    def total(self) -> int:
        """Return the total number of affected rows."""

        return self.inserted + self.deleted


class RateConfigurationStore:
    """Stores the direct rates of a converter so it can be rebuilt later.

    Only direct rates are persisted; derived rates are recomputed when the
    configuration is loaded into a converter. Input order is preserved so
    duplicate pairs resolve the same way after a reload.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self._SessionFactory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, expire_on_commit=False, future=True
        )

    def save(self, rates: Iterable[DirectRate | RateTuple]) -> PersistenceResult:
        """Replace the stored configuration with ``rates``."""

        records = [DirectRate.coerce(item) for item in rates]
        result = PersistenceResult()
        with self._SessionFactory() as session:
            result.deleted = session.execute(delete(_DirectRateRow)).rowcount or 0
            for position, record in enumerate(records):
                session.add(
                    _DirectRateRow(
                        position=position,
                        from_currency=record.pair.base,
                        to_currency=record.pair.quote,
                        rate=str(record.rate),
                    )
                )
            session.commit()
        result.inserted = len(records)
        LOGGER.info(
            "Stored %s direct rates in %s (replaced %s)",
            result.inserted,
            self.db_path,
            result.deleted,
        )
        return result

    def load(self) -> list[DirectRate]:
        with self._SessionFactory() as session:
            stmt = select(_DirectRateRow).order_by(_DirectRateRow.position)
            records: list[DirectRate] = []
            for row in session.execute(stmt).scalars():
                model = cast(_DirectRateRow, row)
                records.append(
                    DirectRate.of(
                        cast(str, model.from_currency),
                        cast(str, model.to_currency),
                        cast(str, model.rate),
                    )
                )
            return records

    def clear(self) -> int:
        with self._SessionFactory() as session:
            deleted = session.execute(delete(_DirectRateRow)).rowcount or 0
            session.commit()
        return deleted

    def close(self) -> None:  # pragma: no cover - trivial
        self.engine.dispose()

    def __enter__(self) -> "RateConfigurationStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["PersistenceResult", "RateConfigurationStore"]
