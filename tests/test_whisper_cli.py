"""Unit tests for the whisper.cpp command-line transcriber."""
import subprocess
import threading

import pytest
from unittest.mock import MagicMock, patch

from core.exceptions import ConfigurationError, TranscriptionCancelled, TranscriptionFailure
from speech.whisper_cli import WhisperCliTranscriber, find_executable, parse_segments

SAMPLE_OUTPUT = """whisper_init_from_file: loading model from 'ggml-small.bin'
system_info: n_threads = 4

[00:00:00.000 --> 00:00:01.500]   τρία κόμμα
[00:00:01.500 --> 00:00:02.800]   δύο

whisper_print_timings: total time = 812.00 ms
"""


class TestParseSegments:
    """Tests for parse_segments()."""

    def test_keeps_only_segment_text(self):
        assert parse_segments(SAMPLE_OUTPUT) == "τρία κόμμα δύο"

    def test_no_segments(self):
        assert parse_segments("whisper_print_timings: total time = 1 ms") == ""

    def test_empty_segment_lines_skipped(self):
        assert parse_segments("[00:00:00.000 --> 00:00:01.000]  \n[00:00:01.000 --> 00:00:02.000] 7") == "7"


class TestFindExecutable:
    """Tests for find_executable()."""

    @patch("speech.whisper_cli.shutil.which")
    def test_searches_known_names(self, mock_which):
        mock_which.side_effect = lambda name: "/opt/bin/main" if name == "main" else None

        assert find_executable() == "/opt/bin/main"

    def test_explicit_existing_path(self, tmp_path):
        binary = tmp_path / "whisper-cli"
        binary.write_text("")

        assert find_executable(str(binary)) == str(binary)

    @patch("speech.whisper_cli.shutil.which", return_value=None)
    def test_missing_binary(self, mock_which):
        with pytest.raises(ConfigurationError):
            find_executable()
        with pytest.raises(ConfigurationError):
            find_executable("no-such-whisper")


@patch("speech.whisper_cli.shutil.which", return_value="/usr/bin/whisper-cli")
class TestWhisperCliTranscriber:
    """Tests for WhisperCliTranscriber."""

    def test_requires_model(self, mock_which):
        with pytest.raises(ConfigurationError):
            WhisperCliTranscriber(model_path="")

    def test_build_command_without_grammar(self, mock_which):
        transcriber = WhisperCliTranscriber(model_path="models/ggml-small.bin")

        assert transcriber.build_command("rec.wav") == [
            "/usr/bin/whisper-cli", "-m", "models/ggml-small.bin", "-f", "rec.wav", "-l", "el",
        ]

    def test_build_command_with_grammar(self, mock_which):
        # Arrange
        transcriber = WhisperCliTranscriber(
            model_path="m.bin", language="en", grammar_path="grades.gbnf", grammar_penalty=80
        )

        # Act
        command = transcriber.build_command("rec.wav")

        # Assert
        assert command == [
            "/usr/bin/whisper-cli", "-m", "m.bin",
            "--grammar", "grades.gbnf", "--grammar-penalty", "80",
            "-f", "rec.wav", "-l", "en",
        ]

    @patch("speech.whisper_cli.subprocess.Popen")
    def test_transcribe_parses_output(self, mock_popen, mock_which):
        # Arrange
        proc = MagicMock()
        proc.stdout.read.return_value = SAMPLE_OUTPUT
        proc.wait.return_value = 0
        proc.returncode = 0
        mock_popen.return_value = proc
        transcriber = WhisperCliTranscriber(model_path="m.bin")

        # Act
        text = transcriber.transcribe("rec.wav")

        # Assert
        assert text == "τρία κόμμα δύο"
        assert mock_popen.call_args[0][0][-4:] == ["-f", "rec.wav", "-l", "el"]

    @patch("speech.whisper_cli.subprocess.Popen")
    def test_nonzero_exit_without_text(self, mock_popen, mock_which):
        proc = MagicMock()
        proc.stdout.read.return_value = "error: failed to open 'rec.wav'"
        proc.returncode = 1
        mock_popen.return_value = proc

        with pytest.raises(TranscriptionFailure, match="exited with code 1"):
            WhisperCliTranscriber(model_path="m.bin").transcribe("rec.wav")

    @patch("speech.whisper_cli.subprocess.Popen", side_effect=FileNotFoundError("whisper-cli"))
    def test_start_failure(self, mock_popen, mock_which):
        with pytest.raises(TranscriptionFailure):
            WhisperCliTranscriber(model_path="m.bin").transcribe("rec.wav")

    @patch("speech.whisper_cli.subprocess.Popen")
    def test_cancel_kills_process(self, mock_popen, mock_which):
        # Arrange
        proc = MagicMock()
        proc.stdout.read.return_value = ""
        proc.wait.side_effect = [subprocess.TimeoutExpired("whisper-cli", 0.1), 0]
        mock_popen.return_value = proc
        cancel_event = threading.Event()
        cancel_event.set()

        # Act / Assert
        with pytest.raises(TranscriptionCancelled):
            WhisperCliTranscriber(model_path="m.bin").transcribe("rec.wav", cancel_event)
        proc.kill.assert_called_once()

    def test_get_config(self, mock_which):
        config = WhisperCliTranscriber(model_path="m.bin", grammar_path="g.gbnf").get_config()

        assert config["engine"] == "WhisperCliTranscriber"
        assert config["grammar_path"] == "g.gbnf"
