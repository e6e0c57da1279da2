"""Unit tests for modlist manifest models."""

from pathlib import Path

import pytest
from modsweep.models.manifest import ManifestInfo, ModlistDescriptor
from pydantic import ValidationError


def _descriptor(archives: list[dict[str, object]]) -> ModlistDescriptor:
    return ModlistDescriptor.model_validate(
        {"$type": "ModList", "Name": "Test", "Archives": archives, "GameType": "SkyrimSE"}
    )


class TestModlistDescriptor:
    """Tests for the descriptor Pydantic models."""

    def test_unknown_fields_ignored(self) -> None:
        """Extra keys in the JSON do not fail validation."""
        descriptor = _descriptor(
            [{"Name": "a.7z", "State": {"$type": "NexusDownloader", "ModID": 1, "Extra": 5}}]
        )

        assert descriptor.name == "Test"
        assert descriptor.archives[0].state.mod_id == 1
        assert descriptor.archives[0].state.file_id is None

    def test_archives_required(self) -> None:
        """A descriptor without an archive list is rejected."""
        with pytest.raises(ValidationError):
            ModlistDescriptor.model_validate({"Name": "Test"})


class TestManifestInfo:
    """Tests for ManifestInfo.from_descriptor."""

    def test_identity_sets(self) -> None:
        """Positive ids populate the sets; other archives only add names."""
        descriptor = _descriptor(
            [
                {"Name": "a.7z", "State": {"ModID": 123, "FileID": 456}},
                {"Name": "b.7z", "State": {"ModID": 999}},
                {"Name": "c.7z", "State": {"ModID": 0, "FileID": 5}},
                {"Name": "d.7z", "State": {"ModID": 77, "FileID": -1}},
                {"Name": "", "State": {"Url": "https://example.com/e.7z"}},
            ]
        )

        info = ManifestInfo.from_descriptor(Path("/lists/test.wabbajack"), descriptor)

        assert info.name == "Test"
        assert info.archive_count == 5
        assert info.package_ids == {"123", "999", "77"}
        assert info.compound_ids == {"123-456"}
        assert info.archive_names == {"a.7z", "b.7z", "c.7z", "d.7z"}
