"""
Filename Generator Module

Builds stored filenames of the form `{unix_timestamp}_{random_hex}.{ext}`.
The random part comes from the secrets module so names cannot be guessed.
"""

import secrets
import time
from typing import Callable


class FilenameGenerator:
    """
    Collision-resistant filename generator.

    Attributes:
        hex_length (int): Number of hex characters in the random part
        clock (Callable[[], float]): Source of the Unix time
        token_hex (Callable[[int], str]): Source of random hex for n bytes
    """

    def __init__(
        self,
        hex_length: int = 16,
        clock: Callable[[], float] = time.time,
        token_hex: Callable[[int], str] = secrets.token_hex,
    ):
        self.hex_length = hex_length
        self.clock = clock
        self.token_hex = token_hex

    def generate(self, extension: str) -> str:
        """
        Generate a filename for the given extension.

        Args:
            extension (str): Validated extension, without the dot

        Returns:
            str: Filename such as 1718000000_9f86d081884c7d65.jpg
        """
        timestamp = int(self.clock())
        random_hex = self.token_hex(self.hex_length // 2)
        return f"{timestamp}_{random_hex}.{extension}"
