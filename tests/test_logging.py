from history.logging_history import HistoryLogger


def make_logger(tmp_path):
    return HistoryLogger(str(tmp_path / "logs" / "h.log"), console=False)


def test_log_directory_is_created(tmp_path):
    make_logger(tmp_path)
    assert (tmp_path / "logs").is_dir()


def test_entries_are_parsed_back_and_filtered(tmp_path):
    logger = make_logger(tmp_path)
    logger.log_kept("s1", "A", "u/a", 1)
    logger.log_kept("s2", "B", "u/b", 1)
    logger.log_evicted("s1", "A", "u/a")

    assert len(logger.get_logs()) == 3
    assert [e["type"] for e in logger.get_logs(session_id="s1")] == ["CONTEXT_KEPT", "CONTEXT_EVICTED"]
    kept = logger.get_logs(event_type="CONTEXT_KEPT")
    assert [e["data"]["name"] for e in kept] == ["A", "B"]
    assert logger.get_logs(limit=1)[0]["type"] == "CONTEXT_EVICTED"


def test_long_values_are_truncated(tmp_path):
    logger = make_logger(tmp_path)
    logger.log_event("s", "CUSTOM", {"uri": "x" * 2000, "items": list(range(50))})
    data = logger.get_logs()[0]["data"]
    assert data["uri"].endswith("... [truncated]")
    assert len(data["uri"]) == 1000 + len("... [truncated]")
    assert data["items"] == list(range(10))


def test_missing_file_gives_no_logs(tmp_path):
    logger = make_logger(tmp_path)
    logger.clear_logs()
    assert logger.get_logs() == []


def test_clear_then_keep_logging(tmp_path):
    logger = make_logger(tmp_path)
    logger.log_initialized("s")
    logger.clear_logs()
    logger.log_truncated("s", 4, 2)
    entries = logger.get_logs()
    assert [e["type"] for e in entries] == ["HISTORY_TRUNCATED"]
    assert entries[0]["data"] == {"previous_size": 4, "max_size": 2}


def test_summary_counts_types(tmp_path, capsys):
    logger = make_logger(tmp_path)
    logger.log_kept("s", "A", "u", 1)
    logger.log_kept("s", "B", "u", 2)
    logger.show_logs_summary()
    out = capsys.readouterr().out
    assert "Total de eventos: 2" in out
    assert "CONTEXT_KEPT: 2" in out


def test_loggers_on_different_files_read_their_own_entries(tmp_path):
    first = HistoryLogger(str(tmp_path / "a.log"), console=False)
    second = HistoryLogger(str(tmp_path / "b.log"), console=False)
    first.log_kept("s", "A", "u/a", 1)
    second.log_kept("s", "B", "u/b", 1)

    assert [e["data"]["name"] for e in first.get_logs()] == ["A"]
    assert [e["data"]["name"] for e in second.get_logs()] == ["B"]


def test_loggers_on_the_same_file_share_handlers(tmp_path):
    first = HistoryLogger(str(tmp_path / "a.log"), console=False)
    second = HistoryLogger(str(tmp_path / "a.log"), console=False)
    first.log_initialized("s")
    second.log_initialized("s")

    assert first.logger is second.logger
    assert len(first.logger.handlers) == 1
    assert len(first.get_logs()) == 2


def test_level_is_per_file(tmp_path):
    quiet = HistoryLogger(str(tmp_path / "quiet.log"), level="WARNING", console=False)
    loud = HistoryLogger(str(tmp_path / "loud.log"), level="INFO", console=False)
    quiet.log_initialized("s")
    loud.log_initialized("s")

    assert quiet.get_logs() == []
    assert len(loud.get_logs()) == 1


def test_logger_without_file_has_no_handlers(tmp_path):
    logger = HistoryLogger(log_file=None)
    logger.log_kept("s", "A", "u", 1)

    assert logger.logger.handlers == []
    assert logger.get_logs() == []
    assert not (tmp_path / "logs").exists()
