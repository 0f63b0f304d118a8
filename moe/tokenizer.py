import re
from dataclasses import dataclass, field
from typing import Dict, List

_QUOTE_EDGES = re.compile(r"^[\"']|[\"']$")


@dataclass(frozen=True)
class Token:
    """A single command-line token, as written in the source."""
    text: str

    @property
    def quoted(self) -> bool:
        """True when the whole token is one double-quoted string."""
        return len(self.text) >= 2 and self.text.startswith('"') and self.text.endswith('"')


@dataclass
class Arguments:
    """
    Parsed trailing tokens of a command.

    params: positional values, quotes stripped
    raw_params: the same positional values as they were written
    attrs: key=value pairs, quotes stripped from the value, later keys win
    """
    params: List[str] = field(default_factory=list)
    raw_params: List[Token] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)

    def param(self, index: int, default: str = '') -> str:
        """Returns the positional value at index, or default if it is missing or empty."""
        if index < len(self.params) and self.params[index]:
            return self.params[index]
        return default


def strip_quotes(text: str) -> str:
    """Removes one quote character (single or double) from each end of text."""
    if not text:
        return ''
    return _QUOTE_EDGES.sub('', text)


def tokenize(line: str) -> List[Token]:
    """
    Splits a line on whitespace, keeping double-quoted spans intact.

    A token is a maximal run of unquoted non-space characters and complete
    quoted strings, so `placeholder="Your name"` stays one token. A quote
    with no closing partner is dropped and ends the token it interrupts.
    """
    tokens: List[Token] = []
    current = ''
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if char.isspace():
            if current:
                tokens.append(Token(current))
                current = ''
            i += 1
        elif char == '"':
            closing = line.find('"', i + 1)
            if closing == -1:
                # Unterminated quote
                if current:
                    tokens.append(Token(current))
                    current = ''
                i += 1
            else:
                current += line[i:closing + 1]
                i = closing + 1
        else:
            current += char
            i += 1
    if current:
        tokens.append(Token(current))
    return tokens


def _split_assignment(text: str) -> int:
    """Returns the index of the first '=' outside double quotes, or -1."""
    in_quotes = False
    for index, char in enumerate(text):
        if char == '"':
            in_quotes = not in_quotes
        elif char == '=' and not in_quotes:
            return index
    return -1


def parse_args(tokens: List[Token]) -> Arguments:
    """Sorts tokens into positional parameters and key=value attributes."""
    args = Arguments()
    for token in tokens:
        eq_index = _split_assignment(token.text)
        if eq_index == -1:
            args.params.append(strip_quotes(token.text))
            args.raw_params.append(token)
            continue
        key = token.text[:eq_index]
        if not key:
            # Bare '=' separator, as in `Var score = 85`
            continue
        args.attrs[key] = strip_quotes(token.text[eq_index + 1:])
    return args
