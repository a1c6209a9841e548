import logging

import pytest
from unittest.mock import patch

import totpgen_cli
from totpgen_cli import (
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_OK,
    PROG,
    Colors,
    ColorMode,
    TotpCLI,
    format_seconds,
    main,
    sanitize_input,
)

RFC_SEED_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

# -----------------------------------------------------------------------------
# FIXTURES
# -----------------------------------------------------------------------------

@pytest.fixture
def frozen_time():
    """Wall clock frozen at t=59s (RFC 6238 first vector)."""
    with patch("time.time", return_value=59.0):
        yield

@pytest.fixture
def run_main(clean_env, frozen_time):
    """Run main() and return its exit code."""
    def _run(*argv):
        with pytest.raises(SystemExit) as exc:
            main(list(argv))
        return exc.value.code
    return _run

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

class TestHelpers:

    def test_prog_name(self):
        assert TotpCLI().build_parser().prog == PROG

    def test_format_seconds(self):
        assert format_seconds(30.0) == "30"
        assert format_seconds(12.5) == "12.5"

    def test_format_seconds_large_step_has_no_exponent(self):
        assert format_seconds(1_000_000.0) == "1000000"
        assert format_seconds(86400.25) == "86400.25"
        assert format_seconds(10.0) == "10"

    def test_sanitize_input_strips_whitespace_and_control_chars(self):
        assert sanitize_input("  GEZD\x07GNBV \n") == "GEZDGNBV"

    def test_colors_never_mode_is_plain(self):
        assert Colors(ColorMode.NEVER).success("123456") == "123456"

    def test_colors_always_mode_wraps(self):
        assert Colors(ColorMode.ALWAYS).error("x") == "\033[91mx\033[0m"

    def test_set_verbose_toggles_debug(self):
        from totpgen import log
        log.set_verbose(True)
        assert log.logger.isEnabledFor(logging.DEBUG)
        log.set_verbose(False)
        assert not log.logger.isEnabledFor(logging.DEBUG)
        assert log.logger.isEnabledFor(logging.WARNING)

# -----------------------------------------------------------------------------
# CODE GENERATION
# -----------------------------------------------------------------------------

class TestGenerate:

    def test_prints_code_and_left_time(self, run_main, capsys):
        assert run_main(RFC_SEED_B32) == EXIT_OK
        out = capsys.readouterr().out.splitlines()
        assert out == ["code: 287082", "left time: 1s"]

    def test_lowercase_secret(self, run_main, capsys):
        assert run_main(RFC_SEED_B32.lower()) == EXIT_OK
        assert "code: 287082" in capsys.readouterr().out

    def test_digits_option(self, run_main, capsys):
        assert run_main(RFC_SEED_B32, "--digits", "8") == EXIT_OK
        assert "code: 94287082" in capsys.readouterr().out

    def test_time_step_option(self, run_main, capsys):
        assert run_main(RFC_SEED_B32, "--time-step", "60") == EXIT_OK
        out = capsys.readouterr().out
        # counter 0 at 59.5s with a 60s step
        assert "code: 755224" in out
        assert "left time: 1s" in out

    def test_large_time_step_left_time(self, run_main, capsys):
        assert run_main(RFC_SEED_B32, "--time-step", "1000000") == EXIT_OK
        # int(59.5) = 59 seconds used
        assert "left time: 999941s" in capsys.readouterr().out

    def test_epoch_start_option(self, run_main, capsys):
        assert run_main(RFC_SEED_B32, "--epoch-start", "30000") == EXIT_OK
        # 29.5s after the origin: counter 0
        assert "code: 755224" in capsys.readouterr().out

    def test_md5_option(self, run_main, capsys):
        assert run_main(RFC_SEED_B32, "--algorithm", "MD5") == EXIT_OK
        out = capsys.readouterr().out
        assert out.startswith("code: ")
        assert "code: 287082" not in out

    def test_environment_defaults(self, run_main, clean_env, capsys):
        clean_env.setenv("TOTPGEN_DIGITS", "8")
        assert run_main(RFC_SEED_B32) == EXIT_OK
        assert "code: 94287082" in capsys.readouterr().out

    def test_option_overrides_environment(self, run_main, clean_env, capsys):
        clean_env.setenv("TOTPGEN_DIGITS", "8")
        assert run_main(RFC_SEED_B32, "-d", "6") == EXIT_OK
        assert "code: 287082" in capsys.readouterr().out

    @patch("getpass.getpass", return_value="  GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ  ")
    def test_prompts_for_secret(self, mock_getpass, run_main, capsys):
        assert run_main() == EXIT_OK
        mock_getpass.assert_called_once()
        assert "code: 287082" in capsys.readouterr().out

    def test_watch_stops_on_ctrl_c(self, run_main, capsys):
        with patch("time.sleep", side_effect=[None, KeyboardInterrupt]):
            assert run_main(RFC_SEED_B32, "--watch", "--no-color") == EXIT_OK
        out = capsys.readouterr().out
        assert out.count("287082") == 2

    def test_verbose_logs_counter(self, run_main, caplog):
        with caplog.at_level(logging.DEBUG, logger="totpgen"):
            assert run_main(RFC_SEED_B32, "--verbose") == EXIT_OK
        assert "counter=1" in caplog.text
        assert "algorithm=SHA1" in caplog.text

# -----------------------------------------------------------------------------
# ERRORS
# -----------------------------------------------------------------------------

class TestErrors:

    def test_invalid_base32_character(self, run_main, capsys):
        assert run_main("A1") == EXIT_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Invalid base32 char '1'" in captured.err

    def test_padding_is_rejected(self, run_main, capsys):
        assert run_main("MZXW6===") == EXIT_ERROR
        assert "'='" in capsys.readouterr().err

    def test_bad_time_step(self, run_main, capsys):
        assert run_main(RFC_SEED_B32, "--time-step", "0") == EXIT_ERROR
        assert "time_step" in capsys.readouterr().err

    def test_bad_digits(self, run_main, capsys):
        assert run_main(RFC_SEED_B32, "--digits", "12") == EXIT_ERROR
        assert "digits" in capsys.readouterr().err

    def test_bad_environment_value(self, run_main, clean_env, capsys):
        clean_env.setenv("TOTPGEN_ALGORITHM", "sha256")
        assert run_main(RFC_SEED_B32) == EXIT_ERROR
        assert "sha256" in capsys.readouterr().err

    def test_unknown_algorithm_is_usage_error(self, run_main):
        assert run_main(RFC_SEED_B32, "--algorithm", "sha256") == 2

    @patch("getpass.getpass", return_value="   ")
    def test_empty_prompt(self, mock_getpass, run_main, capsys):
        assert run_main() == EXIT_ERROR
        assert "No secret" in capsys.readouterr().err

    def test_crypto_error_exits_non_zero(self, run_main, capsys):
        from totpgen.errors import CryptoError
        with patch.object(totpgen_cli.TOTPGenerator, "current_code",
                          side_effect=CryptoError("HMAC-MD5 is not supported")):
            assert run_main(RFC_SEED_B32) == EXIT_ERROR
        assert "HMAC-MD5 is not supported" in capsys.readouterr().err

    def test_keyboard_interrupt_exit_code(self, run_main):
        with patch.object(TotpCLI, "run", side_effect=KeyboardInterrupt):
            assert run_main(RFC_SEED_B32) == EXIT_INTERRUPTED
