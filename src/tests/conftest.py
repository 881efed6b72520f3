"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from obsi.core.config import ObsiConfig


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the user's real vault and config file."""
    for key in ("OBSIDIAN_VAULT", "OBSI_BROWSE_LIMIT", "OBSI_SEARCH_LIMIT", "OBSI_DEBUG"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("OBSI_CONFIG_FILE", str(tmp_path / "no-config.json"))


@pytest.fixture
def make_vault(tmp_path):
    """Factory that builds a vault from a {relative path: content} mapping.

    Paths ending in "/" create empty folders.
    """

    def _make_vault(files: dict[str, str], name: str = "vault") -> Path:
        root = tmp_path / name
        root.mkdir()
        for relative, content in files.items():
            path = root / relative
            if relative.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make_vault


@pytest.fixture
def mock_vault(make_vault):
    """A small PARA-style vault with hidden and non-note files mixed in."""
    return make_vault(
        {
            "Inbox/test-note.md": (
                "---\ncreated: 2026-01-16\ntags: [inbox]\n---\n\n"
                "# Test Note\n\nThis is a test note."
            ),
            "Projects/my-project.md": (
                "---\ncreated: 2026-01-15\ntags: [project]\n---\n\n"
                "# My Project\n\nProject description here."
            ),
            "Areas/": "",
            "Resources/": "",
            "Resources/diagram.png": "not a note",
            ".obsidian/workspace.md": "hidden",
            "Projects/.drafts/secret.md": "hidden",
        }
    )


@pytest.fixture
def config():
    """Default settings."""
    return ObsiConfig()
