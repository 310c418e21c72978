import json

from core.lookup_logger import LookupLogger, LookupRecord


def _record(query: str = "Kraków", **overrides) -> LookupRecord:
    fields = {
        "query": query,
        "tool_name": "current_weather",
        "success": True,
        "latency_ms": 42,
        "latitude": 50.0614,
        "longitude": 19.9366,
    }
    fields.update(overrides)
    return LookupRecord.new(**fields)


def test_lookup_logger_writes_jsonl_records(tmp_path):
    log_path = tmp_path / "logs" / "lookups.jsonl"
    logger = LookupLogger(log_path=log_path, enabled=True)

    logger.log_lookup(_record())
    logger.log_lookup(_record("Atlantis", success=False, error="not_found", message="City not found."))

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["query"] == "Kraków"
    assert first["latitude"] == 50.0614
    assert first["timestamp"]
    second = json.loads(lines[1])
    assert second["success"] is False
    assert second["error"] == "not_found"


def test_disabled_logger_writes_nothing(tmp_path):
    log_path = tmp_path / "lookups.jsonl"
    logger = LookupLogger(log_path=log_path, enabled=False)

    logger.log_lookup(_record())

    assert not log_path.exists()
    assert logger.enabled is False


def test_rotation_moves_full_log_to_backup(tmp_path):
    log_path = tmp_path / "lookups.jsonl"
    logger = LookupLogger(log_path=log_path, enabled=True, max_bytes=600, backup_count=2)

    for index in range(6):
        logger.log_lookup(_record(f"City {index}"))

    assert log_path.exists()
    assert (tmp_path / "lookups.jsonl.1").exists()
    assert not (tmp_path / "lookups.jsonl.3").exists()
    assert log_path.stat().st_size <= 600


def test_rotation_without_backups_truncates(tmp_path):
    log_path = tmp_path / "lookups.jsonl"
    logger = LookupLogger(log_path=log_path, enabled=True, max_bytes=600, backup_count=0)

    for index in range(6):
        logger.log_lookup(_record(f"City {index}"))

    assert not (tmp_path / "lookups.jsonl.1").exists()
    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert json.loads(lines[-1])["query"] == "City 5"
