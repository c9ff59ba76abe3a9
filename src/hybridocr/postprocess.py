# src/hybridocr/postprocess.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

logger = logging.getLogger("hybridocr")

_WORD = re.compile(r"\S+")
_EDGE_PUNCT = "\"'`“”‘’.,;:!?()[]{}<>*"
_REPEATED = re.compile(r"([^\W\d_])\1\1", re.UNICODE)
_INNER_PUNCT = re.compile(r"[^\w\-'’./:,@&%$]", re.UNICODE)
_CONSONANTS = re.compile(r"[bcdfghjklmnpqrstvwxz]{6,}")
_VOWELS = re.compile(r"[aeiou]{5,}")
_CASE_FLIP = re.compile(r"[a-z][A-Z]")
_SPACES = re.compile(r"[ \t]{2,}")


@dataclass
class TextCleaner:
    """
    Drops tokens that look like OCR noise rather than English words.

    A token is noise when, after trimming surrounding punctuation, it
      - is longer than max_word_length and has no hyphen or slash,
      - repeats one letter three times in a row,
      - has more symbols than letters and digits,
      - has two or more unusual symbols inside it,
      - has an implausible run of consonants or vowels,
      - flips from lower to upper case more than once.
    """
    max_word_length: int = 20

    def is_garbage(self, word: str) -> bool:
        core = word.strip(_EDGE_PUNCT)
        if not any(c.isalnum() for c in core):
            # bare punctuation: keep short marks like "-" or "...", drop smears
            return len(word) > 3 and len(set(word)) > 1

        if len(core) > self.max_word_length and not any(c in core for c in "-/"):
            return True
        if _REPEATED.search(core):
            return True

        alnum = sum(1 for c in core if c.isalnum())
        if alnum < len(core) - alnum:
            return True
        if len(_INNER_PUNCT.findall(core)) >= 2:
            return True

        lower = core.lower()
        if lower.isascii() and lower.isalpha():
            if _CONSONANTS.search(lower) or _VOWELS.search(lower):
                return True
        if len(_CASE_FLIP.findall(core)) > 1:
            return True
        return False

    def clean(self, text: str) -> str:
        cleaned = _WORD.sub(lambda m: "" if self.is_garbage(m.group(0)) else m.group(0), text)
        lines = [_SPACES.sub(" ", line).strip() for line in cleaned.splitlines()]
        out = "\n".join(lines)
        if text.endswith("\n"):
            out += "\n"
        return out


_default_cleaner = TextCleaner()


def clean_text(text: str) -> str:
    """Remove OCR garbage from English text. Pure; returns the cleaned text."""
    return _default_cleaner.clean(text)


def clean_file(path: Union[str, Path]) -> None:
    """Rewrite a text file in place with clean_text applied."""
    with open(path, "r+", encoding="utf-8", errors="replace") as f:
        text = f.read()
        f.seek(0)
        f.truncate()
        f.write(clean_text(text))
    logger.debug("Cleaned OCR text in %s", Path(path).name)
