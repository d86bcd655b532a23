#!/usr/bin/env python3
"""
Futuna - Database Utilities Module
Copyright (c) 2025 Vijaykumar Singh
Licensed under the Apache License 2.0

Database Utilities Module
Table definitions and engine/session management using SQLAlchemy.
PostgreSQL in production, SQLite in tests.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    func,
    text,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from futuna.config import DatabaseSettings
from futuna.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)

# SQLAlchemy Base
Base = declarative_base()


class TickerRow(Base):
    """Tickers table model"""

    __tablename__ = "tickers"

    symbol = Column(String(16), primary_key=True)
    name = Column(String(255))


class AnalysisRow(Base):
    """Analyses table model, one row per (ticker, analyzed_at)"""

    __tablename__ = "analyses"
    __table_args__ = (UniqueConstraint("ticker", "analyzed_at", name="uq_analyses_ticker_analyzed_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(16), ForeignKey("tickers.symbol"), nullable=False)
    analyzed_at = Column(Date, nullable=False)
    short_term = Column(Text)
    short_confidence = Column(Integer)
    long_term = Column(Text)
    long_confidence = Column(Integer)
    strategies = Column(JSON)
    overall = Column(Text)
    overall_confidence = Column(Integer)
    sources = Column(JSON)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class RequestLogRow(Base):
    """Audit trail of raw model exchanges"""

    __tablename__ = "request_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request = Column(JSON)
    response = Column(JSON)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class DatabaseManager:
    """
    Owns the engine and session factory for one process.

    Created by the entry point and handed to every reader/writer; use it as a
    context manager so the connection pool is disposed on shutdown.
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None, url: Optional[str] = None):
        self.settings = settings or DatabaseSettings()
        self.url = url or self.settings.url
        self.engine: Optional[Engine] = None
        self.SessionLocal = None
        self._initialize_engine()

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def _initialize_engine(self):
        """Initialize database engine and session factory"""
        kwargs = {"echo": self.settings.echo, "pool_pre_ping": True}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            kwargs["pool_size"] = self.settings.pool_size
            kwargs["max_overflow"] = self.settings.max_overflow

        try:
            self.engine = create_engine(self.url, **kwargs)
            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        except Exception as e:
            logger.error(f"Failed to initialize database engine: {e}")
            raise

        logger.debug("Database engine initialized for dialect %s", self.engine.dialect.name)

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @contextmanager
    def get_session(self):
        """Get database session context manager"""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def insert(self, table):
        """Dialect-native INSERT construct supporting ON CONFLICT clauses"""
        if self.dialect == "postgresql":
            return postgresql.insert(table)
        if self.dialect == "sqlite":
            return sqlite.insert(table)
        raise PersistenceError(f"Upsert not supported for dialect {self.dialect}")

    def create_tables(self):
        """Create all database tables"""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created successfully")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")
            raise PersistenceError(f"Failed to create database tables: {e}") from e

    def test_connection(self) -> bool:
        """Test database connection"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection test successful")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    def close(self):
        """Dispose of pooled connections"""
        if self.engine is not None:
            self.engine.dispose()
            logger.debug("Database engine disposed")
