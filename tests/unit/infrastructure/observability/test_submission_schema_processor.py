from diff_submitter.infrastructure.observability.logging.submission_schema_processor import (
    submission_schema_processor,
)


class TestSubmissionSchemaProcessor:
    def test_minimal_event(self):
        result = submission_schema_processor(None, "info", {"event": "Submission workflow started", "level": "info"})

        assert result["message"] == "Submission workflow started"
        assert result["level"] == "info"
        assert result["service"] == "diff-submitter"
        assert result["event"] == {"eventType": None, "actorId": None, "diffId": None}
        assert "error" not in result
        assert "extra" not in result

    def test_full_event_is_nested(self):
        event = {
            "event": "Submission workflow failed",
            "timestamp": "2024-01-01T00:00:00Z",
            "level": "error",
            "run_id": "r1",
            "event_type": "workflow.diff_submit",
            "actor_id": "dev",
            "diff_id": 42,
            "processing_status": "ERROR",
            "error_type": "ReviewServiceError",
            "error_details": "Authorization: abc",
            "error_retryable": True,
            "context_component": "conduit_http_client",
            "context_method": "differential.creatediff",
            "token": "cli-xyz",
            "change_count": 2,
        }

        result = submission_schema_processor(None, "error", event)

        assert result["run_id"] == "r1"
        assert result["processing"] == {"status": "ERROR", "retries": None}
        assert result["error"] == {
            "type": "ReviewServiceError",
            "code": None,
            "details": "Authorization: [REDACTED]",
            "retryable": True,
        }
        assert result["event"] == {"eventType": "workflow.diff_submit", "actorId": "dev", "diffId": 42}
        assert result["context"] == {"component": "conduit_http_client", "method": "differential.creatediff"}
        assert result["extra"] == {"token": "[REDACTED]", "change_count": 2}

    def test_service_name_from_environment(self, monkeypatch):
        monkeypatch.setenv("SERVICE_NAME", "custom")

        assert submission_schema_processor(None, "info", {"event": "x"})["service"] == "custom"
