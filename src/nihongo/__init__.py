"""nihongo-script public API."""

import logging

from .code import CAPTURE, NO_MATCH, Code
from .context import ALERT_NAME, CONSOLE_NAME, Context
from .errors import NihongoArgumentError, NihongoError, NihongoSyntaxError
from .evaluator import evaluate, find_function, run, run_code
from .functions import BuiltinFunction, default_functions
from .lexer import Token, normalize, split_words, tokenize

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "run",
    "run_code",
    "evaluate",
    "find_function",
    "tokenize",
    "normalize",
    "split_words",
    "Token",
    "Code",
    "CAPTURE",
    "NO_MATCH",
    "Context",
    "CONSOLE_NAME",
    "ALERT_NAME",
    "BuiltinFunction",
    "default_functions",
    "NihongoError",
    "NihongoSyntaxError",
    "NihongoArgumentError",
]
