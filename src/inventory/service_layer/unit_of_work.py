"""
Pattern Unit of Work.

Le Unit of Work délimite une transaction : tout ce qui est exécuté
dans le bloc est validé ensemble par commit(), ou annulé.

    with uow:
        uow.session.execute(...)
        uow.commit()

Le rollback est automatique si commit() n'est pas appelé, ce qui
garantit qu'une écriture multi-enregistrements interrompue ne laisse
jamais la moitié de ses modifications en base.
"""

from __future__ import annotations

import abc

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from inventory import config


def default_session_factory() -> sessionmaker:
    engine = create_engine(
        config.get_database_uri(),
        isolation_level="SERIALIZABLE",
        pool_pre_ping=True,
        connect_args=_connect_args(),
    )
    return sessionmaker(bind=engine)


def _connect_args() -> dict:
    """
    Bornes de temps de chaque connexion : ni l'ouverture, ni une requête,
    ni l'attente d'un verrou ne dépassent DB_TIMEOUT_SECONDS.
    """
    uri = config.get_database_uri()
    timeout = config.get_db_timeout_seconds()
    if uri.startswith("sqlite"):
        return {"timeout": timeout}
    if uri.startswith("postgresql"):
        milliseconds = timeout * 1000
        return {
            "connect_timeout": timeout,
            "options": f"-c statement_timeout={milliseconds} -c lock_timeout={milliseconds}",
        }
    if uri.startswith("mysql"):
        return {"connect_timeout": timeout, "read_timeout": timeout, "write_timeout": timeout}
    return {"connect_timeout": timeout}


class AbstractUnitOfWork(abc.ABC):
    """Interface abstraite : commit explicite, rollback par défaut."""

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args: object) -> None:
        self.rollback()

    def commit(self) -> None:
        self._commit()

    @abc.abstractmethod
    def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    Implémentation concrète avec SQLAlchemy.

    Une session est ouverte à l'entrée du bloc et fermée à la sortie.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.session: Session = self.session_factory()
        return super().__enter__()

    def __exit__(self, *args: object) -> None:
        try:
            super().__exit__(*args)
        finally:
            self.session.close()

    def _commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
