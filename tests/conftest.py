from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from exception_mapper.core.config import Settings
from exception_mapper.lookup import MappingConfigLookup
from exception_mapper.main import create_app
from exception_mapper.models import TranslatorConfig
from exception_mapper.translator import ExceptionTranslator


class InMemoryHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=1)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self) -> list[str]:
        return [record.getMessage() for record in self.records]


@pytest.fixture()
def log_capture() -> Iterator[tuple[logging.Logger, InMemoryHandler]]:
    logger = logging.getLogger("tests.exception_mapper")
    handler = InMemoryHandler()
    original_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(1)
    try:
        yield logger, handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(original_level)
        handler.close()


@pytest.fixture()
def make_translator(
    log_capture: tuple[logging.Logger, InMemoryHandler],
) -> Callable[..., ExceptionTranslator]:
    logger, _ = log_capture

    def _factory(
        mapping: dict[str, Any] | None = None,
        **flags: Any,
    ) -> ExceptionTranslator:
        return ExceptionTranslator(MappingConfigLookup(mapping), TranslatorConfig(**flags), logger)

    return _factory


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, log_level="WARNING")


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    # Starlette re-raises after answering errors from its server-error
    # middleware; the response is what these tests inspect.
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
