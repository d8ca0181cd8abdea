from __future__ import annotations

from pathlib import Path

import pytest

from page_splitter.config import SplitterSettings


def test_defaults() -> None:
    settings = SplitterSettings()

    assert settings.output_dir == Path("./output")
    assert settings.storage == "legacy"
    assert not settings.rollback_on_failure
    assert not settings.strict_ranges


def test_from_env_reads_prefixed_variables() -> None:
    settings = SplitterSettings.from_env(
        {
            "PAGE_SPLITTER_OUTPUT_DIR": "/srv/pages",
            "PAGE_SPLITTER_STORAGE": "Scoped",
            "PAGE_SPLITTER_ROLLBACK": "yes",
            "PAGE_SPLITTER_STRICT": "0",
            "PAGE_SPLITTER_LOG_LEVEL": "debug",
        }
    )

    assert settings.output_dir == Path("/srv/pages")
    assert settings.storage == "scoped"
    assert settings.rollback_on_failure
    assert not settings.strict_ranges
    assert settings.log_level == "DEBUG"


def test_from_env_empty_mapping_uses_defaults() -> None:
    assert SplitterSettings.from_env({}) == SplitterSettings()


def test_unknown_storage_is_rejected() -> None:
    with pytest.raises(ValueError):
        SplitterSettings(storage="cloud")


def test_with_overrides_skips_none() -> None:
    settings = SplitterSettings().with_overrides(output_dir="out", storage=None, strict_ranges=True)

    assert settings.output_dir == Path("out")
    assert settings.storage == "legacy"
    assert settings.strict_ranges
