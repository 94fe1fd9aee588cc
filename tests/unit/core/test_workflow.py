"""Unit tests for the upload workflow and its rollback."""

import logging
from pathlib import Path
from typing import Any

import pytest
from pspublisher.core.errors import WorkflowStep
from pspublisher.core.result import Err, Ok
from pspublisher.core.workflow import run_upload
from pspublisher.models.release import PublishStatus, UploadConfig


@pytest.fixture
def config(apk_file: Path, key_file: Path) -> UploadConfig:
    """A validated configuration without mapping file."""
    return UploadConfig(
        package_id="com.example.app",
        key_path=key_file,
        apk_path=apk_file,
        track="production",
        release_notes="Bug fixes",
        status=PublishStatus.COMPLETED,
    )


@pytest.fixture
def config_with_mapping(config: UploadConfig, mapping_file: Path) -> UploadConfig:
    """A validated configuration with mapping file."""
    return UploadConfig(
        package_id=config.package_id,
        key_path=config.key_path,
        apk_path=config.apk_path,
        track=config.track,
        release_notes=config.release_notes,
        status=config.status,
        mapping_path=mapping_file,
    )


class TestSuccessfulUpload:
    """Tests for the happy path."""

    def test_call_sequence(self, publisher: Any, config: UploadConfig) -> None:
        """Steps run strictly in order and nothing is deleted."""
        result = run_upload(config, publisher)

        assert isinstance(result, Ok)
        assert publisher.operations == [
            "create_edit",
            "list_listings",
            "upload_apk",
            "update_track",
            "validate_edit",
            "commit_edit",
        ]

    def test_track_release_uses_uploaded_version_code(
        self, publisher: Any, config: UploadConfig
    ) -> None:
        """Version code 42 from the upload is the only released version."""
        result = run_upload(config, publisher)

        assert isinstance(result, Ok)
        outcome = result.value
        assert outcome.apk.version_code == 42
        assert outcome.apk.sha1 == "abc123"
        assert outcome.release.version_codes == (42,)
        assert outcome.release.status == PublishStatus.COMPLETED

        body = publisher.track_bodies[0]
        assert body["track"] == "production"
        assert body["releases"] == [
            {
                "status": "completed",
                "versionCodes": ["42"],
                "releaseNotes": [{"language": "en-US", "text": "Bug fixes"}],
            }
        ]

    def test_mapping_uploaded_with_version_code(
        self, publisher: Any, config_with_mapping: UploadConfig, mapping_file: Path
    ) -> None:
        """The mapping file is keyed to the uploaded version code."""
        result = run_upload(config_with_mapping, publisher)

        assert isinstance(result, Ok)
        assert result.value.mapping_uploaded
        mapping_calls = [
            args for name, args in publisher.calls if name == "upload_deobfuscation_file"
        ]
        assert mapping_calls == [("com.example.app", "edit-1", 42, mapping_file)]
        assert publisher.operations.index("upload_deobfuscation_file") == 3

    def test_no_mapping_step_without_mapping(self, publisher: Any, config: UploadConfig) -> None:
        run_upload(config, publisher)

        assert "upload_deobfuscation_file" not in publisher.operations

    def test_tracks_listed_at_debug_level(
        self, publisher: Any, config: UploadConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Known tracks are listed before the update when debugging."""
        with caplog.at_level(logging.DEBUG, logger="pspublisher.core.workflow"):
            result = run_upload(config, publisher)

        assert isinstance(result, Ok)
        assert publisher.operations.index("list_tracks") < publisher.operations.index(
            "update_track"
        )
        assert "Known tracks: production, beta" in caplog.text


class TestRollback:
    """Tests for rollback after a failed step."""

    @pytest.mark.parametrize(
        ("operation", "step"),
        [
            ("list_listings", WorkflowStep.FETCH_LISTINGS),
            ("upload_apk", WorkflowStep.UPLOAD_APK),
            ("update_track", WorkflowStep.UPDATE_TRACK),
            ("validate_edit", WorkflowStep.VALIDATE),
            ("commit_edit", WorkflowStep.COMMIT),
        ],
    )
    def test_failed_step_deletes_edit_once(
        self, publisher: Any, config: UploadConfig, operation: str, step: WorkflowStep
    ) -> None:
        publisher.failures[operation] = "remote failure"

        result = run_upload(config, publisher)

        assert isinstance(result, Err)
        assert result.error.step == step
        assert result.error.message == "remote failure"
        assert result.error.rolled_back
        assert result.error.edit_id == "edit-1"
        assert publisher.operations.count("delete_edit") == 1
        assert publisher.operations[-1] == "delete_edit"

    def test_upload_failure_stops_workflow(self, publisher: Any, config: UploadConfig) -> None:
        """After a failed upload neither the track nor the commit is touched."""
        publisher.failures["upload_apk"] = "apk rejected"

        run_upload(config, publisher)

        assert publisher.operations == ["create_edit", "list_listings", "upload_apk", "delete_edit"]
        assert "update_track" not in publisher.operations
        assert "commit_edit" not in publisher.operations

    def test_mapping_failure_rolls_back(
        self, publisher: Any, config_with_mapping: UploadConfig
    ) -> None:
        publisher.failures["upload_deobfuscation_file"] = "bad mapping"

        result = run_upload(config_with_mapping, publisher)

        assert isinstance(result, Err)
        assert result.error.step == WorkflowStep.UPLOAD_MAPPING
        assert publisher.operations.count("delete_edit") == 1

    def test_mapping_failure_not_triggered_without_mapping(
        self, publisher: Any, config: UploadConfig
    ) -> None:
        """A failing mapping endpoint is irrelevant when no mapping is given."""
        publisher.failures["upload_deobfuscation_file"] = "bad mapping"

        result = run_upload(config, publisher)

        assert isinstance(result, Ok)

    def test_no_listings_rolls_back(self, publisher: Any, config: UploadConfig) -> None:
        publisher.listings = []

        result = run_upload(config, publisher)

        assert isinstance(result, Err)
        assert result.error.step == WorkflowStep.FETCH_LISTINGS
        assert publisher.operations == ["create_edit", "list_listings", "delete_edit"]

    def test_create_failure_has_nothing_to_roll_back(
        self, publisher: Any, config: UploadConfig
    ) -> None:
        publisher.failures["create_edit"] = "unauthorized"

        result = run_upload(config, publisher)

        assert isinstance(result, Err)
        assert result.error.step == WorkflowStep.CREATE_EDIT
        assert not result.error.rolled_back
        assert publisher.operations == ["create_edit"]

    def test_failed_delete_keeps_original_error(
        self, publisher: Any, config: UploadConfig
    ) -> None:
        """A failing delete is reported alongside, not instead of, the step error."""
        publisher.failures["commit_edit"] = "commit conflict"
        publisher.failures["delete_edit"] = "delete failed"

        result = run_upload(config, publisher)

        assert isinstance(result, Err)
        assert result.error.step == WorkflowStep.COMMIT
        assert result.error.message == "commit conflict"
        assert not result.error.rolled_back
        assert result.error.rollback_error == "delete failed"
        assert publisher.operations.count("delete_edit") == 1
