"""
Redirect code generation strategies.
Uses Strategy Pattern so the registrar does not care how codes are made.
"""

import secrets
import string
from abc import ABC, abstractmethod


class CodeGenerator(ABC):
    """Abstract base class for redirect code generators"""

    @abstractmethod
    def generate(self) -> str:
        """
        Generate a redirect code.

        Uniqueness is not guaranteed here: the link store's unique
        constraint is the final arbiter.
        """
        pass


class RandomCodeGenerator(CodeGenerator):
    """
    Fixed-length random codes over [a-zA-Z0-9].

    Uses the secrets module so codes cannot be predicted from earlier ones.
    62^6 is about 5.7e10 codes at the default length.
    """

    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

    def __init__(self, length: int = 6):
        if length < 1:
            raise ValueError("Redirect code length must be positive")
        self.length = length

    def generate(self) -> str:
        return ''.join(secrets.choice(self.ALPHABET) for _ in range(self.length))
