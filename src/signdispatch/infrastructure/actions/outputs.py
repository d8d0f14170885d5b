"""Host pipeline outputs for GitHub Actions."""

import os
import sys
import uuid
from pathlib import Path
from typing import Dict, Optional, TextIO

from signdispatch.shared.logging import escape_command_data, get_logger

logger = get_logger(__name__)


class ActionOutputs:
    """
    Reports step outputs and failures to the Actions runner.

    Outputs are appended to the file named by ``GITHUB_OUTPUT`` using the
    multiline ``name<<delimiter`` form. Outside a runner the values are
    only logged.
    """

    def __init__(
        self,
        output_path: Optional[Path] = None,
        stream: Optional[TextIO] = None
    ):
        if output_path is None and os.getenv("GITHUB_OUTPUT"):
            output_path = Path(os.environ["GITHUB_OUTPUT"])
        self.output_path = output_path
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def set_output(self, name: str, value: str) -> None:
        """Publish one named output value."""
        if self.output_path is None:
            logger.info(f"Output {name}={value}")
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError("Unexpected delimiter collision in output")

        with open(self.output_path, 'a', encoding='utf-8') as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    def set_outputs(self, outputs: Dict[str, str]) -> None:
        """Publish several outputs in order."""
        for name, value in outputs.items():
            self.set_output(name, value)

    def set_failed(self, message: str) -> None:
        """Emit an error annotation for the step."""
        self.stream.write(f"::error::{escape_command_data(message)}\n")
        self.stream.flush()
