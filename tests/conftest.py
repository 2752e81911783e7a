"""Shared fixtures: sample dossier payloads loaded from tests/fixtures."""

from pathlib import Path

import pytest
from omegaconf import OmegaConf

from dossier.contexts.editing import Document

FIXTURES_PATH = Path(__file__).parent / "fixtures"


@pytest.fixture
def valid_payload():
    """Decoded JSON-shaped dict for a complete, valid dossier."""
    return OmegaConf.to_container(OmegaConf.load(FIXTURES_PATH / "valid_dossier.yaml"), resolve=True)


@pytest.fixture
def valid_document(valid_payload):
    return Document.from_dict(valid_payload)
