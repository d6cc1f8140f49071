"""whisper.cpp command-line transcriber."""
from __future__ import annotations

import re
import shutil
import subprocess
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from core.exceptions import ConfigurationError, TranscriptionCancelled, TranscriptionFailure

from .base_transcriber import BaseTranscriber

# "[00:00:00.000 --> 00:00:02.500]  text"
_SEGMENT_LINE = re.compile(
    r"^\[\d{2}:\d{2}:\d{2}\.\d+\s*-->\s*\d{2}:\d{2}:\d{2}\.\d+\]\s*(.+)$"
)
_EXECUTABLE_NAMES = ("whisper-cli", "whisper-cli.exe", "whisper", "whisper.exe", "main")


def parse_segments(output: str) -> str:
    """Join the text of every timestamped segment line in whisper.cpp output."""
    lines: List[str] = []
    for line in output.splitlines():
        match = _SEGMENT_LINE.match(line.strip())
        if match:
            lines.append(match.group(1).strip())
    return " ".join(line for line in lines if line)


def find_executable(explicit: Optional[str] = None) -> str:
    """Resolve the whisper.cpp binary from config or PATH."""
    if explicit:
        if Path(explicit).exists():
            return str(explicit)
        found = shutil.which(explicit)
        if found:
            return found
        raise ConfigurationError(f"whisper.cpp binary not found: {explicit}")
    for name in _EXECUTABLE_NAMES:
        found = shutil.which(name)
        if found:
            return found
    raise ConfigurationError("whisper.cpp binary not found on PATH (set WHISPER_EXECUTABLE)")


class WhisperCliTranscriber(BaseTranscriber):
    """Runs the whisper.cpp CLI as a child process.

    The process is polled every ``poll_interval`` seconds and killed as soon
    as the cancel event is set. An optional GBNF grammar biases decoding
    towards ids, names and grades.
    """

    def __init__(
        self,
        model_path: str,
        executable: Optional[str] = None,
        language: str = "el",
        grammar_path: Optional[str] = None,
        grammar_penalty: int = 100,
        poll_interval: float = 0.1,
    ) -> None:
        super().__init__(language)
        if not model_path:
            raise ConfigurationError("whisper.cpp needs a model file (--model / SPEECH_MODEL_PATH)")
        self.model_path = model_path
        self.executable = find_executable(executable)
        self.grammar_path = grammar_path
        self.grammar_penalty = grammar_penalty
        self.poll_interval = poll_interval

    def build_command(self, wav_path: Union[str, Path]) -> List[str]:
        command = [self.executable, "-m", Path(self.model_path).as_posix()]
        if self.grammar_path:
            command += [
                "--grammar", Path(self.grammar_path).as_posix(),
                "--grammar-penalty", str(self.grammar_penalty),
            ]
        command += ["-f", Path(wav_path).as_posix(), "-l", self.language]
        return command

    def transcribe(self, wav_path: Union[str, Path], cancel_event: Optional[threading.Event] = None) -> str:
        command = self.build_command(wav_path)
        logger.debug(f"[whisper] Executing: {' '.join(command)}")
        try:
            proc = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise TranscriptionFailure(f"Failed to start whisper.cpp: {e}") from e

        # Drain output on a helper thread so a full pipe cannot stall the child.
        chunks: List[str] = []
        reader = threading.Thread(target=lambda: chunks.append(proc.stdout.read()), daemon=True)
        reader.start()

        while True:
            try:
                proc.wait(timeout=self.poll_interval)
                break
            except subprocess.TimeoutExpired:
                if cancel_event is not None and cancel_event.is_set():
                    proc.kill()
                    proc.wait()
                    logger.info("[whisper] transcription cancelled")
                    raise TranscriptionCancelled("Transcription cancelled")

        reader.join()
        output = "".join(chunks)
        text = parse_segments(output)
        if proc.returncode != 0 and not text:
            raise TranscriptionFailure(
                f"whisper.cpp exited with code {proc.returncode}: {output.strip()[-300:]}"
            )
        logger.info(f"[whisper] {text}")
        return text

    def get_config(self) -> Dict[str, Any]:
        config = super().get_config()
        config.update({
            "executable": self.executable,
            "model_path": self.model_path,
            "grammar_path": self.grammar_path,
            "grammar_penalty": self.grammar_penalty,
        })
        return config
