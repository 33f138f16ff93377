"""Shared fixtures: in-memory store, recording notifier, fast hasher."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from src.core.concurrency import DriverLocks
from src.core.use_cases.register_driver import RegisterDriverUseCase
from src.core.use_cases.submit_documents import SubmitDocumentsUseCase
from src.infrastructure.memory.in_memory_repository import InMemoryDriverRepository
from tests.factories import PlainHasher, RecordingNotifier, registration_input, upload


@pytest.fixture
def repo():
    return InMemoryDriverRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def hasher():
    return PlainHasher()


@pytest.fixture
def locks():
    return DriverLocks()


@pytest.fixture
def register(repo, notifier, hasher):
    return RegisterDriverUseCase(repo, notifier, hasher)


@pytest.fixture
def submit(repo, notifier, locks):
    return SubmitDocumentsUseCase(repo, notifier, locks=locks)


@pytest.fixture
def driver(register):
    """A freshly registered driver, status aguardando_documentos."""
    return register.execute(registration_input())


@pytest.fixture
def driver_in_review(driver, submit):
    result = submit.execute(driver.id, [upload("CNH"), upload("CRLV"), upload("selfie_cnh", "jpg")])
    return result.driver
