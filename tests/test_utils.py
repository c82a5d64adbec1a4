"""Tests for privastead_setup.utils module."""
import os
import pytest
import sh
from pathlib import Path
from unittest.mock import patch, MagicMock
from privastead_setup import utils


def test_command_exists_when_command_found():
    """Test command_exists returns True when command is found."""
    with patch('shutil.which', return_value='/usr/bin/git'):
        assert utils.command_exists('git') is True


def test_command_exists_when_command_not_found():
    """Test command_exists returns False when command not found."""
    with patch('shutil.which', return_value=None):
        assert utils.command_exists('nonexistent') is False


def test_which_returns_resolved_path():
    with patch('shutil.which', return_value='/home/op/.cargo/bin/cargo'):
        assert utils.which('cargo') == '/home/op/.cargo/bin/cargo'


def test_get_current_user_uses_effective_uid():
    """Test get_current_user looks up the effective user like whoami."""
    entry = MagicMock(pw_name='privastead')
    with patch('os.geteuid', return_value=1000), \
         patch('pwd.getpwuid', return_value=entry) as mock_getpwuid:
        assert utils.get_current_user() == 'privastead'
        mock_getpwuid.assert_called_once_with(1000)


def test_get_current_user_falls_back_to_env():
    """Test get_current_user uses USER when the uid has no passwd entry."""
    with patch('pwd.getpwuid', side_effect=KeyError), \
         patch.dict('os.environ', {'USER': 'normaluser'}, clear=True):
        assert utils.get_current_user() == 'normaluser'


@pytest.mark.parametrize("log, tag", [
    (utils.log_info, "[INFO]"),
    (utils.log_success, "[SUCCESS]"),
    (utils.log_warning, "[WARNING]"),
    (utils.log_error, "[ERROR]"),
])
def test_status_messages_are_tagged(capsys, log, tag):
    """Test each status channel prints its tag before the message."""
    log("Test message")
    captured = capsys.readouterr()
    assert tag in captured.out
    assert captured.out.endswith(" Test message\n")


def test_status_tags_are_coloured():
    """Test the tags carry distinct ANSI colours."""
    with patch('privastead_setup.utils.typer.echo') as mock_echo:
        utils.log_info("a")
        utils.log_error("b")
    info_line = mock_echo.call_args_list[0].args[0]
    error_line = mock_echo.call_args_list[1].args[0]
    assert "\x1b[34m" in info_line
    assert "\x1b[31m" in error_line


def test_log_action(capsys):
    """Test log_action outputs indented message."""
    utils.log_action("Installing package")
    captured = capsys.readouterr()
    assert "  -> Installing package\n" == captured.out


@patch('privastead_setup.utils.logging.basicConfig')
def test_setup_logging_verbose(mock_basic_config):
    """Test setup_logging in verbose mode."""
    utils.setup_logging(verbose=True)
    assert mock_basic_config.call_args.kwargs['level'] == utils.logging.DEBUG


@patch('privastead_setup.utils.logging.basicConfig')
def test_setup_logging_normal(mock_basic_config):
    """Test setup_logging in normal mode."""
    utils.setup_logging(verbose=False)
    assert mock_basic_config.call_args.kwargs['level'] == utils.logging.WARNING


class TestWorkingDirectory:
    """Tests for the scoped directory change."""

    def test_enters_and_restores(self, tmp_path):
        start = Path.cwd()
        with utils.working_directory(tmp_path) as inside:
            assert Path.cwd() == tmp_path.resolve()
            assert inside == tmp_path.resolve()
        assert Path.cwd() == start

    def test_restores_on_error(self, tmp_path):
        """Test the original directory comes back when the block raises."""
        start = Path.cwd()
        with pytest.raises(RuntimeError):
            with utils.working_directory(tmp_path):
                raise RuntimeError("boom")
        assert Path.cwd() == start

    def test_missing_directory_leaves_cwd_alone(self, tmp_path):
        start = Path.cwd()
        with pytest.raises(FileNotFoundError):
            with utils.working_directory(tmp_path / "absent"):
                pass
        assert Path.cwd() == start


class TestRunCommand:
    """Tests for running external commands through sh."""

    @patch('privastead_setup.utils.sh.Command')
    def test_success(self, mock_command):
        """Test a zero exit is reported with the captured output."""
        def fake_run(*args, **kwargs):
            kwargs['_out']("Cloning into 'privastead'...\n")
            return MagicMock()
        mock_command.return_value.side_effect = fake_run

        result = utils.run_command("git", "clone", "url")

        mock_command.assert_called_once_with("git")
        args = mock_command.return_value.call_args
        assert args.args == ("clone", "url")
        assert args.kwargs['_err_to_out'] is True
        assert result.ok
        assert result.exit_code == 0
        assert result.output == "Cloning into 'privastead'...\n"

    @patch('privastead_setup.utils.sh.Command')
    def test_nonzero_exit_is_reported_not_raised(self, mock_command):
        error = sh.ErrorReturnCode_128("git clone", b"", b"fatal: repository not found")
        mock_command.return_value.side_effect = error

        result = utils.run_command("git", "clone", "url")

        assert not result.ok
        assert result.exit_code == 128

    @patch('privastead_setup.utils.sh.Command')
    def test_missing_program(self, mock_command, capsys):
        """Test a missing program is reported through the status only."""
        mock_command.side_effect = sh.CommandNotFound("cargo")

        result = utils.run_command("cargo", "build")

        assert result.exit_code == utils.COMMAND_NOT_FOUND
        assert "[ERROR]" not in capsys.readouterr().out
