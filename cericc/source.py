"""Character-level access to program text, with push-back and line counting."""

from __future__ import annotations


class SourceReader:
    """Reads a program text one character at a time.

    Characters may be pushed back with :meth:`unread`.  The current line
    number goes up on every newline read and down on every newline pushed
    back.  The end of input is reported as the empty string.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.position = 0
        self.line = 1

    def peek(self) -> str:
        """Return the next character without consuming it, or '' at the end."""
        if self.position >= len(self.text):
            return ""
        return self.text[self.position]

    def read(self) -> str:
        """Consume and return the next character, or '' at the end."""
        char = self.peek()
        if char:
            self.position += 1
            if char == "\n":
                self.line += 1
        return char

    def take(self, count: int) -> str:
        """Consume and return up to ``count`` characters."""
        if count < 0:
            raise ValueError(f"negative count: {count}")
        chunk = self.text[self.position:self.position + count]
        self.position += len(chunk)
        self.line += chunk.count("\n")
        return chunk

    def unread(self, char: str) -> None:
        """Push ``char`` back so that it is the next character read.

        Pushing back the empty string (the end of input) does nothing.
        """
        if char == "":
            return
        if len(char) != 1:
            raise ValueError(f"can only push back a single character, got {char!r}")
        if self.position > 0 and self.text[self.position - 1] == char:
            self.position -= 1
        else:
            self.text = self.text[:self.position] + char + self.text[self.position:]
        if char == "\n":
            self.line -= 1

    def at_end(self) -> bool:
        """Tell whether every character has been consumed."""
        return self.position >= len(self.text)

    def skip_comment(self) -> bool:
        """Consume the body of a comment up to and including ``*)``.

        The opening ``(*`` must already have been consumed.  Returns True
        when the closing ``*)`` was found and False when the input ended
        first, in which case everything left has been consumed.
        """
        while True:
            char = self.read()
            if not char:
                return False
            if char == "*":
                following = self.read()
                if following == ")":
                    return True
                self.unread(following)