"""Tests for the colored console logger."""

import threading

from printer_discovery.utils.logger import LogLevel, Logger, get_logger, set_log_level


class TestLevels:
    """Level filtering."""

    def test_debug_hidden_by_default(self, capsys):
        Logger("test").debug("probe details")
        assert capsys.readouterr().out == ""

    def test_debug_shown_when_verbose(self, capsys):
        set_log_level(LogLevel.DEBUG)
        Logger("test").debug("probe details")
        assert "probe details" in capsys.readouterr().out

    def test_global_level_applies_to_existing_loggers(self, capsys):
        logger = get_logger("early")
        set_log_level(LogLevel.WARNING)
        logger.info("hidden")
        logger.warning("shown")
        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_explicit_level_wins(self, capsys):
        set_log_level(LogLevel.DEBUG)
        Logger("quiet", min_level=LogLevel.ERROR).info("hidden")
        assert capsys.readouterr().out == ""

    def test_errors_go_to_stderr(self, capsys):
        Logger("test").error("could not write", exception=IOError("disk full"))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "could not write" in captured.err
        assert "OSError: disk full" in captured.err

    def test_context_details(self, capsys):
        Logger("test").info("scan finished", printers=2)
        assert "printers=2" in capsys.readouterr().out


class TestEmit:
    """Plain scan output."""

    def test_emit_is_unformatted(self, capsys):
        Logger("test").emit("🎯 Found printer: 10.0.0.2 → Front Desk")
        assert capsys.readouterr().out == "🎯 Found printer: 10.0.0.2 → Front Desk\n"

    def test_emit_ignores_level(self, capsys):
        set_log_level(LogLevel.ERROR)
        Logger("test").emit("✅ Found 1 SNMP printers:")
        assert "Found 1" in capsys.readouterr().out

    def test_concurrent_lines_never_interleave(self, capsys):
        logger = Logger("test")
        lines = [f"🎯 Found printer: 10.0.{i}.1 → printer-{i}" for i in range(50)]
        threads = [threading.Thread(target=logger.emit, args=(line,)) for line in lines]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        out = capsys.readouterr().out.splitlines()
        assert sorted(out) == sorted(lines)
